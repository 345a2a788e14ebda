#!/usr/bin/env python3
"""Manual smoke run against a live backend: design then image, printed as JSON"""

import json
import sys

sys.path.insert(0, '.')

from config import settings
from generation_orchestrator import GenerationOrchestrator
from robot_schema import design_to_payload
from robot_service_client import RobotServiceClient

prompt = "hexapod lunar rover"
if len(sys.argv) > 1:
    prompt = " ".join(sys.argv[1:])

orchestrator = GenerationOrchestrator(
    RobotServiceClient.from_settings(settings),
    on_state=lambda state: print(f"[STATE] {state.value}"),
)
result = orchestrator.generate(prompt)

if result.error:
    print(f"FAILED with {type(result.error).__name__}: {result.error.user_message}")
    sys.exit(1)

print(json.dumps(design_to_payload(result.design), indent=2, ensure_ascii=False))
print(f"imageUrl: {result.image_url[:80] + '...' if result.image_url else None}")
