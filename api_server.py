"""
HTTP backend for RoboForge.

Exposes the design and image generation endpoints consumed by the UI client.
The Gemini client is built once in create_app and handed to the handlers
through app.state.

Run with: uvicorn api_server:app --port 3000
"""

from typing import Optional
from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ai_robot_generator import RobotGenerator
from config import Settings, settings
from errors import CONFIGURATION_MESSAGE
from robot_schema import DesignRequest, ImageRequest, ImageResponse, design_to_payload


router = APIRouter(prefix="/api", tags=["generator"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/generate-design")
def generate_design(req: DesignRequest, request: Request):
    print(f'[DESIGN API] Generating design for: "{req.prompt}"')

    generator: Optional[RobotGenerator] = request.app.state.generator
    if generator is None:
        print("[DESIGN API] API_KEY is missing!")
        return _error(500, CONFIGURATION_MESSAGE)

    if not req.prompt.strip():
        return _error(400, "Prompt must not be empty")

    try:
        design = generator.generate_design(req.prompt)
    except Exception as e:
        print(f"[DESIGN API] Design generation failed: {type(e).__name__}: {e}")
        return _error(500, str(e) or "Failed to generate design")

    return design_to_payload(design)


@router.post("/generate-image", response_model=ImageResponse)
def generate_image(req: ImageRequest, request: Request):
    print(f'[IMAGE API] Generating image for: "{req.description}"')

    generator: Optional[RobotGenerator] = request.app.state.generator
    if generator is None:
        print("[IMAGE API] API_KEY is missing!")
        return _error(500, CONFIGURATION_MESSAGE)

    if not req.description.strip():
        return _error(400, "Prompt must not be empty")

    try:
        image_url = generator.generate_image(req.description)
    except Exception as e:
        print(f"[IMAGE API] Image generation failed: {type(e).__name__}: {e}")
        return _error(500, str(e) or "Failed to generate image")

    return ImageResponse(imageUrl=image_url)


@router.get("/health")
def health(request: Request):
    config: Settings = request.app.state.settings
    return {
        "ok": True,
        "configured": request.app.state.generator is not None,
        "designModel": config.design_model,
        "imageModel": config.image_model,
    }


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(".".join(str(p) for p in err.get("loc", ())) for err in exc.errors())
    return _error(422, f"Invalid request body: {fields}")


def create_app(config: Settings = settings, generator: Optional[RobotGenerator] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Runtime settings
        generator: Pre-built upstream adapter; built from config when omitted

    Returns:
        Configured FastAPI app. Without an API key no generator is built and
        both generation endpoints answer 500 before contacting Gemini.
    """
    app = FastAPI(title="RoboForge API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if generator is None and config.is_configured:
        generator = RobotGenerator.from_settings(config)
    if generator is None:
        print("[SERVER] ⚠️ API_KEY not set; generation endpoints will return 500")

    app.state.settings = config
    app.state.generator = generator

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(router)
    return app


app = create_app()
