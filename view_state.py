"""
UI state for the RoboForge page, kept free of Streamlit so it can be tested.

Every accepted submission gets a monotonically increasing token. Only the
result of the latest token is applied; anything older that finishes later is
discarded.
"""

import random
import time
from dataclasses import dataclass, field
from typing import List, Optional

from generation_orchestrator import GenerationOrchestrator, GenerationResult
from telemetry import TelemetrySample, advance_telemetry, initial_telemetry


QUICK_PROMPTS = (
    "Search & Rescue",
    "Deep Sea Exploration",
    "Medical Assistant",
    "Warehouse Logistics",
)

# fragment timers fire a little early or late
TICK_SLACK = 0.9


@dataclass
class ViewState:
    prompt: str = ""
    loading: bool = False
    error: Optional[str] = None
    notice: Optional[str] = None
    result: Optional[GenerationResult] = None
    telemetry: List[TelemetrySample] = field(default_factory=initial_telemetry)
    last_tick: Optional[float] = None
    latest_token: int = 0
    generation_count: int = 0

    @classmethod
    def create(cls, telemetry_window: int = 20, rng: Optional[random.Random] = None) -> "ViewState":
        return cls(telemetry=initial_telemetry(telemetry_window, rng))

    def use_quick_prompt(self, prompt: str) -> None:
        """Fill the prompt box; the user still has to press Generate"""
        self.prompt = prompt

    def begin_submission(self, prompt: str) -> Optional[int]:
        """
        Accept a prompt and start a submission.

        Returns:
            The submission token, or None if the prompt is empty/whitespace-only
        """
        if not prompt or not prompt.strip():
            return None

        self.prompt = prompt
        self.latest_token += 1
        self.loading = True
        self.error = None
        self.notice = None
        return self.latest_token

    def is_latest(self, token: int) -> bool:
        return token == self.latest_token

    def complete_submission(self, token: int, result: GenerationResult) -> bool:
        """
        Apply a finished submission if it is still the latest one.
        A failed result sets the error and keeps the previous design on screen.

        Returns:
            True if the result was applied, False if it was stale
        """
        if not self.is_latest(token):
            print(f"[VIEW] Discarding stale result for submission {token} (latest is {self.latest_token})")
            return False

        self.loading = False
        if result.error is not None:
            self.error = result.error.user_message
        else:
            self.result = result
            self.generation_count += 1
        return True

    def pop_notice(self) -> Optional[str]:
        """Return the pending success notice once, then clear it"""
        notice, self.notice = self.notice, None
        return notice

    def tick(self, rng: Optional[random.Random] = None) -> None:
        self.telemetry = advance_telemetry(self.telemetry, rng)

    def tick_if_due(self, now: float, interval: float, rng: Optional[random.Random] = None) -> bool:
        """
        Advance telemetry only when a full interval has passed since the last tick,
        so page reruns in between do not add samples.
        """
        if self.last_tick is not None and now - self.last_tick < interval * TICK_SLACK:
            return False
        self.last_tick = now
        self.tick(rng)
        return True


def submit_prompt(state: ViewState, orchestrator: GenerationOrchestrator, prompt: str) -> bool:
    """
    Run one generation for the prompt and apply it to the state.
    On success a notice with the elapsed time is left for the next render.

    Returns:
        True if a result (success or error) was applied; False if the prompt was
        rejected without contacting the network or the result was stale
    """
    token = state.begin_submission(prompt)
    if token is None:
        return False

    start_time = time.time()
    result = orchestrator.generate(prompt)
    applied = state.complete_submission(token, result)
    if applied and result.error is None:
        state.notice = f"Design generated in {time.time() - start_time:.1f} seconds!"
    return applied
