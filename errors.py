"""
Error kinds shared by the backend, the HTTP client and the orchestrator.
Every error carries a user_message that is safe to show in the UI.
"""

from typing import Optional


CONFIGURATION_MESSAGE = "API_KEY not configured on server"
INVALID_RESPONSE_MESSAGE = "The AI service returned an invalid response. Please try again."


class RoboForgeError(Exception):
    """Base exception for robot generation failures"""

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class ConfigurationError(RoboForgeError):
    """Backend is missing its upstream credential"""

    def __init__(self, message: str = CONFIGURATION_MESSAGE):
        super().__init__(message, CONFIGURATION_MESSAGE)


class TransportError(RoboForgeError):
    """Network failure or non-success HTTP status from a backend endpoint"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body[:100]


class ResponseFormatError(RoboForgeError):
    """
    Upstream content could not be decoded into a structured object.
    The raw text is kept for diagnostics only and never shown to the user.
    """

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message, INVALID_RESPONSE_MESSAGE)
        self.raw_text = raw_text


class UpstreamEmptyError(RoboForgeError):
    """Upstream call succeeded but returned no usable text or image"""
    pass
