# Reference: python_gemini_ai_integrations blueprint
import base64
import binascii
import io
from typing import Any, Callable, Optional
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception
from google import genai
from google.genai import types
from PIL import Image

from config import Settings
from errors import ConfigurationError, UpstreamEmptyError
from response_normalizer import normalize_design_response
from robot_schema import RobotDesign


DESIGN_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "name": types.Schema(type=types.Type.STRING),
        "purpose": types.Schema(type=types.Type.STRING),
        "specifications": types.Schema(
            type=types.Type.STRING,
            description="Detailed markdown description of the robot's specs",
        ),
        "components": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "name": types.Schema(type=types.Type.STRING),
                    "type": types.Schema(type=types.Type.STRING),
                    "description": types.Schema(type=types.Type.STRING),
                },
                required=["name", "type", "description"],
            ),
        ),
        "controlLogic": types.Schema(
            type=types.Type.STRING,
            description="Arduino or Python code snippet for basic movement",
        ),
    },
    required=["name", "purpose", "specifications", "components", "controlLogic"],
)


def create_design_prompt(prompt: str) -> str:
    return (
        f"Design a robot based on this description: {prompt}. \n"
        "Provide technical details, components, and basic control code."
    )


def create_image_prompt(description: str) -> str:
    return (
        f"A highly detailed, professional engineering concept render of a robot: {description}. "
        "Cinematic lighting, technical blueprint style background, 4k, photorealistic."
    )


def create_gemini_client(config: Settings) -> genai.Client:
    """
    Construct the Gemini client once for the whole process.

    Raises:
        ConfigurationError: If no API key is configured
    """
    if not config.is_configured:
        raise ConfigurationError()

    http_options = None
    if config.gemini_base_url:
        http_options = types.HttpOptions(base_url=config.gemini_base_url)
    return genai.Client(api_key=config.api_key, http_options=http_options)


def is_rate_limit_error(exception: BaseException) -> bool:
    """Check if the exception is a rate limit or quota violation error."""
    error_msg = str(exception)
    return (
        "429" in error_msg
        or "RATELIMIT_EXCEEDED" in error_msg
        or "quota" in error_msg.lower()
        or "rate limit" in error_msg.lower()
        or (hasattr(exception, 'status') and exception.status == 429)
        or (hasattr(exception, 'code') and exception.code == 429)
    )


def _is_valid_image(image_bytes: bytes) -> bool:
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img.verify()
        return True
    except (OSError, SyntaxError, ValueError) as validation_error:
        print(f"[IMAGE API] ⚠️ Image validation failed: {validation_error}")
        return False


def extract_image_data_uri(response: Any) -> Optional[str]:
    """
    Pull the first inline image out of a generate_content response.

    Args:
        response: Gemini GenerateContentResponse

    Returns:
        data:<mime>;base64,<data> URI, or None if the response carries no usable image
    """
    candidates = getattr(response, 'candidates', None) or []
    if not candidates:
        return None

    content = getattr(candidates[0], 'content', None)
    parts = getattr(content, 'parts', None) or []

    for part in parts:
        inline_data = getattr(part, 'inline_data', None)
        if not inline_data or not inline_data.data:
            continue

        mime_type = inline_data.mime_type or "image/png"
        image_data = inline_data.data

        # Gemini returns raw bytes; older gateways pass base64 strings through
        if isinstance(image_data, bytes):
            image_bytes = image_data
        elif isinstance(image_data, str):
            try:
                image_bytes = base64.b64decode(image_data, validate=True)
            except (binascii.Error, ValueError):
                print("[IMAGE API] ⚠️ Inline image string is not valid base64")
                return None
        else:
            print(f"[IMAGE API] ⚠️ Unexpected image data type: {type(image_data)}")
            return None

        if not _is_valid_image(image_bytes):
            return None

        encoded = base64.b64encode(image_bytes).decode("ascii")
        print(f"[IMAGE API] Received {len(image_bytes)} bytes ({mime_type})")
        return f"data:{mime_type};base64,{encoded}"

    return None


class RobotGenerator:
    """
    Upstream adapter shared by the API handlers.
    Holds one configured Gemini client for many calls.
    """

    def __init__(
        self,
        client: genai.Client,
        design_model: str = "gemini-3-flash-preview",
        image_model: str = "gemini-2.5-flash-image",
        max_attempts: int = 1,
    ):
        self.client = client
        self.design_model = design_model
        self.image_model = image_model
        self.max_attempts = max(1, max_attempts)

    @classmethod
    def from_settings(cls, config: Settings) -> "RobotGenerator":
        return cls(
            client=create_gemini_client(config),
            design_model=config.design_model,
            image_model=config.image_model,
            max_attempts=config.upstream_max_attempts,
        )

    def _call(self, fn: Callable[..., Any], **kwargs) -> Any:
        # max_attempts=1 means a single call with no retry
        retrying = retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=128),
            retry=retry_if_exception(is_rate_limit_error),
            reraise=True,
        )
        return retrying(fn)(**kwargs)

    def generate_design_text(self, prompt: str) -> str:
        """
        Ask the design model for a structured robot design.

        Args:
            prompt: User description of the robot

        Returns:
            Raw response text (expected to be JSON)

        Raises:
            UpstreamEmptyError: If the model returned no text
        """
        response = self._call(
            self.client.models.generate_content,
            model=self.design_model,
            contents=create_design_prompt(prompt),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=DESIGN_RESPONSE_SCHEMA,
            ),
        )
        print("[DESIGN API] Received response from Gemini")

        text = response.text
        if not text:
            raise UpstreamEmptyError("Gemini returned an empty response.")
        return text

    def generate_design(self, prompt: str) -> RobotDesign:
        """Generate and normalize a robot design"""
        return normalize_design_response(self.generate_design_text(prompt))

    def generate_image(self, description: str) -> Optional[str]:
        """
        Generate a concept render for the robot.

        Args:
            description: Robot description used in the image prompt

        Returns:
            Inline data URI, or None if the model returned no image part
        """
        response = self._call(
            self.client.models.generate_content,
            model=self.image_model,
            contents=create_image_prompt(description),
            config=types.GenerateContentConfig(
                response_modalities=["TEXT", "IMAGE"]
            ),
        )
        print("[IMAGE API] Received image response from Gemini")

        image_url = extract_image_data_uri(response)
        if not image_url:
            print("[IMAGE API] ⚠️ No image data found in Gemini response")
        return image_url
