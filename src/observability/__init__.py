"""
Observability for the Digimon GM Assistant.

Records dice rolls, encounter phase transitions, turn advances and refused
rule checks so a session can be audited and reproduced from its seed.
"""

from src.observability.run_log import (
    RunLog,
    LogEvent,
    EventType,
    RollEvent,
    TransitionEvent,
    TurnEvent,
    RuleCheckEvent,
    get_run_log,
    reset_run_log,
)

__all__ = [
    "RunLog",
    "LogEvent",
    "EventType",
    "RollEvent",
    "TransitionEvent",
    "TurnEvent",
    "RuleCheckEvent",
    "get_run_log",
    "reset_run_log",
]
