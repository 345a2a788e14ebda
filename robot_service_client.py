"""
Client for the RoboForge backend endpoints.
Classifies every failure into the error kinds in errors.py.
"""

from typing import Any, Dict, Optional
import requests

from config import Settings, settings
from errors import CONFIGURATION_MESSAGE, ConfigurationError, ResponseFormatError, TransportError, UpstreamEmptyError
from response_normalizer import normalize_design_response
from robot_schema import RobotDesign


def _is_json(response: requests.Response) -> bool:
    content_type = response.headers.get('content-type') or ""
    return "application/json" in content_type


class RobotServiceClient:
    """
    Talks to POST /api/generate-design and POST /api/generate-image.
    Timeouts are the configured transport timeout; nothing is retried.
    """

    def __init__(
        self,
        base_url: str = settings.backend_url,
        timeout: float = settings.request_timeout_seconds,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, config: Settings) -> "RobotServiceClient":
        return cls(base_url=config.backend_url, timeout=config.request_timeout_seconds)

    def _post(self, path: str, payload: Dict[str, Any], default_error: str) -> requests.Response:
        try:
            response = self.session.post(
                f"{self.base_url}{path}",
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Network error contacting {path}: {e}")

        if not response.ok:
            self._raise_for_error(response, default_error)

        if not _is_json(response):
            raise TransportError(
                f"Expected JSON response but received: {response.text[:100]}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    @staticmethod
    def _raise_for_error(response: requests.Response, default_error: str) -> None:
        """Raise the classified error for a non-success response"""
        text = response.text or ""
        message = None
        if _is_json(response):
            try:
                data = response.json()
            except ValueError:
                data = None
            if isinstance(data, dict) and isinstance(data.get('error'), str) and data['error']:
                message = data['error']
            elif isinstance(data, dict):
                message = default_error

        if message == CONFIGURATION_MESSAGE:
            raise ConfigurationError()
        if message is None:
            message = f"Server Error ({response.status_code}): {text[:100]}"
        raise TransportError(message, status_code=response.status_code, body=text)

    def generate_robot_design(self, prompt: str) -> RobotDesign:
        """
        Request a robot design for the prompt.

        Args:
            prompt: Non-empty robot description

        Returns:
            Normalized RobotDesign

        Raises:
            ConfigurationError: Backend has no API key
            TransportError: Network failure, non-200 or non-JSON response
            UpstreamEmptyError: Backend answered with an empty body
            ResponseFormatError: Body holds no decodable design object
        """
        response = self._post("/api/generate-design", {"prompt": prompt}, "Failed to generate design")
        if not response.text.strip():
            raise UpstreamEmptyError("Design service returned an empty response.")
        return normalize_design_response(response.text)

    def generate_robot_image(self, description: str) -> Optional[str]:
        """
        Request a concept image for the description.

        Returns:
            Image URL (usually a data URI), or None if the backend produced no image

        Raises:
            RoboForgeError: Any failure; callers treat this step as best-effort
        """
        response = self._post("/api/generate-image", {"description": description}, "Failed to generate image")
        try:
            data = response.json()
        except ValueError:
            raise ResponseFormatError("Image response is not valid JSON", raw_text=response.text)

        image_url = data.get('imageUrl') if isinstance(data, dict) else None
        if isinstance(image_url, str) and image_url:
            return image_url
        return None
