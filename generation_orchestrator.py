"""
Sequences the mandatory design step and the best-effort image step into a
single GenerationResult per prompt.

Per submission the orchestrator moves through:

    IDLE -> DESIGNING -> DESIGN_FAILED
                      -> DESIGN_READY -> IMAGING -> IMAGE_READY | IMAGE_FAILED -> COMPLETE

A design failure ends the submission and the image step is never attempted.
An image failure is logged and dropped; the design is still returned.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from errors import RoboForgeError
from robot_schema import RobotDesign


T = TypeVar("T")

GENERIC_FAILURE_MESSAGE = "Failed to generate robot design. Please try again."


class GenerationState(str, Enum):
    IDLE = "idle"
    DESIGNING = "designing"
    DESIGN_FAILED = "design_failed"
    DESIGN_READY = "design_ready"
    IMAGING = "imaging"
    IMAGE_READY = "image_ready"
    IMAGE_FAILED = "image_failed"
    COMPLETE = "complete"


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one submission. error is set only when the design step failed."""
    design: Optional[RobotDesign] = None
    image_url: Optional[str] = None
    error: Optional[RoboForgeError] = None

    def __post_init__(self):
        if self.image_url is not None and self.design is None:
            raise ValueError("image_url requires a design")
        if self.error is not None and self.design is not None:
            raise ValueError("a failed result carries no design")

    @property
    def ok(self) -> bool:
        return self.error is None and self.design is not None


@dataclass(frozen=True)
class StepOutcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[RoboForgeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def as_roboforge_error(error: Exception) -> RoboForgeError:
    if isinstance(error, RoboForgeError):
        return error
    return RoboForgeError(str(error) or GENERIC_FAILURE_MESSAGE)


def run_step(fn: Callable[..., T], *args: Any) -> StepOutcome[T]:
    """Run one generation call and capture its failure instead of raising"""
    try:
        return StepOutcome(value=fn(*args))
    except Exception as e:
        return StepOutcome(error=as_roboforge_error(e))


def discard_error(outcome: StepOutcome[T], label: str) -> Optional[T]:
    """Isolation for best-effort steps: log a failure and continue without a value"""
    if outcome.ok:
        return outcome.value
    print(f"[ORCHESTRATOR] {label} failed (ignored): {type(outcome.error).__name__}: {outcome.error}")
    return None


class GenerationOrchestrator:
    """
    Runs design then image generation against a service client.

    Args:
        service: Object with generate_robot_design(prompt) and generate_robot_image(description)
        on_state: Optional callback receiving each GenerationState transition
    """

    def __init__(self, service: Any, on_state: Optional[Callable[[GenerationState], None]] = None):
        self.service = service
        self.on_state = on_state

    def _emit(self, state: GenerationState) -> None:
        if self.on_state:
            self.on_state(state)

    def generate(self, prompt: str) -> GenerationResult:
        if not prompt or not prompt.strip():
            raise ValueError("Prompt must not be empty")

        self._emit(GenerationState.DESIGNING)
        design_outcome = run_step(self.service.generate_robot_design, prompt)
        if not design_outcome.ok:
            print(f"[ORCHESTRATOR] Design generation failed: {type(design_outcome.error).__name__}: {design_outcome.error}")
            self._emit(GenerationState.DESIGN_FAILED)
            return GenerationResult(error=design_outcome.error)

        self._emit(GenerationState.DESIGN_READY)

        # Image is secondary: its failure never invalidates the design
        self._emit(GenerationState.IMAGING)
        image_url = discard_error(run_step(self.service.generate_robot_image, prompt), "Image generation")
        self._emit(GenerationState.IMAGE_READY if image_url else GenerationState.IMAGE_FAILED)

        self._emit(GenerationState.COMPLETE)
        return GenerationResult(design=design_outcome.value, image_url=image_url)
