import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()


def _csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    # Gemini
    api_key: str = field(default_factory=lambda: os.getenv("API_KEY") or os.getenv("GEMINI_API_KEY", ""))
    gemini_base_url: str = field(default_factory=lambda: os.getenv("GEMINI_BASE_URL", ""))
    design_model: str = field(default_factory=lambda: os.getenv("DESIGN_MODEL", "gemini-3-flash-preview"))
    image_model: str = field(default_factory=lambda: os.getenv("IMAGE_MODEL", "gemini-2.5-flash-image"))
    upstream_max_attempts: int = field(default_factory=lambda: int(os.getenv("UPSTREAM_MAX_ATTEMPTS", "1")))

    # Backend / client
    backend_url: str = field(default_factory=lambda: os.getenv("ROBOFORGE_BACKEND_URL", "http://localhost:3000"))
    request_timeout_seconds: float = field(default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT_SECONDS", "120")))
    cors_origins: List[str] = field(default_factory=lambda: _csv(os.getenv("CORS_ORIGINS", "http://localhost:8501")))

    # Telemetry
    telemetry_window: int = field(default_factory=lambda: int(os.getenv("TELEMETRY_WINDOW", "20")))
    telemetry_interval_seconds: float = field(default_factory=lambda: float(os.getenv("TELEMETRY_INTERVAL_SECONDS", "1.0")))

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


settings = Settings()
