"""Tests for prompt intake and last-submission-wins view state"""
import random

from errors import ConfigurationError, TransportError
from generation_orchestrator import GenerationOrchestrator, GenerationResult
from robot_schema import build_robot_design, get_design_example
from view_state import QUICK_PROMPTS, ViewState, submit_prompt


DATA_URI = "data:image/png;base64,iVBORw0KGgo="


class FakeService:
    def __init__(self, design_error=None):
        self.design_error = design_error
        self.calls = 0

    def generate_robot_design(self, prompt):
        self.calls += 1
        if self.design_error:
            raise self.design_error
        return build_robot_design({**get_design_example(), "name": prompt})

    def generate_robot_image(self, description):
        return DATA_URI


def test_blank_prompt_is_rejected_without_network():
    state = ViewState.create()
    service = FakeService()

    assert submit_prompt(state, GenerationOrchestrator(service), "   ") is False
    assert service.calls == 0
    assert state.loading is False
    assert state.latest_token == 0


def test_successful_submission_sets_result():
    state = ViewState.create()

    assert submit_prompt(state, GenerationOrchestrator(FakeService()), "hexapod lunar rover")
    assert state.loading is False
    assert state.error is None
    assert state.result.design.name == "hexapod lunar rover"
    assert state.result.image_url == DATA_URI
    assert state.generation_count == 1


def test_failure_keeps_previous_design_and_shows_message():
    state = ViewState.create()
    submit_prompt(state, GenerationOrchestrator(FakeService()), "first")
    previous = state.result

    submit_prompt(state, GenerationOrchestrator(FakeService(design_error=ConfigurationError())), "second")

    assert state.result is previous
    assert state.error == "API_KEY not configured on server"
    assert state.loading is False


def test_transport_error_message_is_shown_verbatim():
    state = ViewState.create()
    error = TransportError("Server Error (502): Bad Gateway", status_code=502)

    submit_prompt(state, GenerationOrchestrator(FakeService(design_error=error)), "rover")

    assert state.error == "Server Error (502): Bad Gateway"
    assert state.result is None


def test_stale_result_is_discarded():
    state = ViewState.create()
    older = state.begin_submission("older")
    newer = state.begin_submission("newer")

    newer_result = GenerationResult(design=build_robot_design({"name": "newer"}))
    older_result = GenerationResult(design=build_robot_design({"name": "older"}))

    assert state.complete_submission(newer, newer_result) is True
    assert state.complete_submission(older, older_result) is False
    assert state.result.design.name == "newer"
    assert state.generation_count == 1


def test_stale_error_does_not_clobber_newer_submission():
    state = ViewState.create()
    older = state.begin_submission("older")
    newer = state.begin_submission("newer")

    assert state.complete_submission(older, GenerationResult(error=TransportError("late failure"))) is False
    assert state.error is None
    assert state.loading is True

    state.complete_submission(newer, GenerationResult(design=build_robot_design({})))
    assert state.loading is False


def test_new_submission_clears_error():
    state = ViewState.create()
    submit_prompt(state, GenerationOrchestrator(FakeService(design_error=TransportError("down"))), "rover")

    token = state.begin_submission("rover again")

    assert token == 2
    assert state.error is None
    assert state.loading is True


def test_tick_advances_window():
    state = ViewState.create(telemetry_window=10, rng=random.Random(7))
    last_time = state.telemetry[-1].time

    state.tick(random.Random(8))

    assert len(state.telemetry) == 10
    assert state.telemetry[-1].time == last_time + 1


def test_success_leaves_notice_for_next_render():
    state = ViewState.create()

    submit_prompt(state, GenerationOrchestrator(FakeService()), "rover")

    assert state.notice.startswith("Design generated in ")
    assert state.pop_notice().endswith("seconds!")
    assert state.pop_notice() is None


def test_failure_leaves_no_notice():
    state = ViewState.create()

    submit_prompt(state, GenerationOrchestrator(FakeService(design_error=TransportError("down"))), "rover")

    assert state.notice is None


def test_tick_if_due_skips_reruns_inside_interval():
    state = ViewState.create(telemetry_window=10, rng=random.Random(7))
    first_time = state.telemetry[-1].time

    assert state.tick_if_due(100.0, 1.0) is True
    assert state.tick_if_due(100.2, 1.0) is False
    assert state.tick_if_due(100.5, 1.0) is False
    assert state.tick_if_due(101.0, 1.0) is True

    assert state.telemetry[-1].time == first_time + 2


def test_quick_prompt_fills_prompt_without_submitting():
    state = ViewState.create()

    state.use_quick_prompt(QUICK_PROMPTS[0])

    assert state.prompt == "Search & Rescue"
    assert state.latest_token == 0
    assert state.loading is False
