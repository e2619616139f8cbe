"""
NLU boundary layer.

This package keeps the bot agnostic of the intent engine behind it.

Supported backends:
- WitBackend: Wit.ai /converse
- StubNLUBackend: Deterministic fake engine (tests and offline runs)

Example usage:
    from nlu import NLUBridge, StubNLUBackend

    bridge = NLUBridge(store, sender, StubNLUBackend())
    bridge.submit(session_id, "weather in Madrid")
"""

from .types import ActionRequest, ActionResponse, ConverseStep, NLUError, StepType
from .base import NLUBackend
from .stub import StubNLUBackend
from .wit import WitBackend
from .engine import ActionEngine, DEFAULT_MAX_STEPS
from .bridge import NLUBridge, first_entity_value

__all__ = [
    "ActionRequest",
    "ActionResponse",
    "ConverseStep",
    "NLUError",
    "StepType",
    "NLUBackend",
    "StubNLUBackend",
    "WitBackend",
    "ActionEngine",
    "DEFAULT_MAX_STEPS",
    "NLUBridge",
    "first_entity_value",
]
