"""
Run Log for GM session event tracking.

Captures the deterministic events of a session (dice rolls, encounter phase
transitions, turn advances, refused rule checks) so a GM can audit what the
engine did and reproduce a session from its seed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Callable
import json
import logging

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of events that can be logged."""

    ROLL = "roll"  # Dice roll
    TRANSITION = "transition"  # Encounter phase change
    TURN = "turn"  # Encounter turn advance
    RULE_CHECK = "rule_check"  # Refused build or evolution step
    CUSTOM = "custom"


@dataclass
class LogEvent:
    """Base class for all logged events."""

    # Subclasses set the correct value in __post_init__
    event_type: EventType = EventType.CUSTOM
    timestamp: datetime = field(default_factory=datetime.now)
    sequence_number: int = 0
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp.isoformat(),
            "sequence_number": self.sequence_number,
            "context": self.context,
        }

    @classmethod
    def _base_kwargs(cls, data: dict[str, Any]) -> dict[str, Any]:
        return {
            "timestamp": datetime.fromisoformat(data["timestamp"]),
            "sequence_number": data.get("sequence_number", 0),
            "context": data.get("context", {}),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LogEvent":
        """Create from dictionary."""
        return cls(event_type=EventType(data["event_type"]), **cls._base_kwargs(data))

    def __str__(self) -> str:
        return f"[{self.sequence_number}] {self.event_type.value.upper()} {self.context}"


@dataclass
class RollEvent(LogEvent):
    """A dice roll event."""

    notation: str = ""  # e.g., "3d6"
    rolls: list[int] = field(default_factory=list)
    modifier: int = 0
    total: int = 0
    reason: str = ""

    def __post_init__(self):
        self.event_type = EventType.ROLL

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "notation": self.notation,
                "rolls": self.rolls,
                "modifier": self.modifier,
                "total": self.total,
                "reason": self.reason,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RollEvent":
        return cls(
            notation=data.get("notation", ""),
            rolls=data.get("rolls", []),
            modifier=data.get("modifier", 0),
            total=data.get("total", 0),
            reason=data.get("reason", ""),
            **cls._base_kwargs(data),
        )

    def __str__(self) -> str:
        if self.modifier > 0:
            return f"[{self.sequence_number}] ROLL {self.notation}: {self.rolls} + {self.modifier} = {self.total} ({self.reason})"
        elif self.modifier < 0:
            return f"[{self.sequence_number}] ROLL {self.notation}: {self.rolls} - {abs(self.modifier)} = {self.total} ({self.reason})"
        return f"[{self.sequence_number}] ROLL {self.notation}: {self.rolls} = {self.total} ({self.reason})"


@dataclass
class TransitionEvent(LogEvent):
    """An encounter phase transition."""

    encounter_id: str = ""
    from_state: str = ""
    to_state: str = ""
    trigger: str = ""

    def __post_init__(self):
        self.event_type = EventType.TRANSITION

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "encounter_id": self.encounter_id,
                "from_state": self.from_state,
                "to_state": self.to_state,
                "trigger": self.trigger,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TransitionEvent":
        return cls(
            encounter_id=data.get("encounter_id", ""),
            from_state=data.get("from_state", ""),
            to_state=data.get("to_state", ""),
            trigger=data.get("trigger", ""),
            **cls._base_kwargs(data),
        )

    def __str__(self) -> str:
        return f"[{self.sequence_number}] TRANSITION {self.from_state} -> {self.to_state} ({self.trigger})"


@dataclass
class TurnEvent(LogEvent):
    """An encounter turn advance."""

    encounter_id: str = ""
    round: int = 0
    participant_id: str = ""
    participant_name: str = ""
    new_round: bool = False
    expired_effects: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.event_type = EventType.TURN

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "encounter_id": self.encounter_id,
                "round": self.round,
                "participant_id": self.participant_id,
                "participant_name": self.participant_name,
                "new_round": self.new_round,
                "expired_effects": self.expired_effects,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TurnEvent":
        return cls(
            encounter_id=data.get("encounter_id", ""),
            round=data.get("round", 0),
            participant_id=data.get("participant_id", ""),
            participant_name=data.get("participant_name", ""),
            new_round=data.get("new_round", False),
            expired_effects=data.get("expired_effects", []),
            **cls._base_kwargs(data),
        )

    def __str__(self) -> str:
        marker = " NEW ROUND" if self.new_round else ""
        line = f"[{self.sequence_number}] TURN round {self.round}: {self.participant_name or self.participant_id}{marker}"
        if self.expired_effects:
            line += f" (expired: {', '.join(self.expired_effects)})"
        return line


@dataclass
class RuleCheckEvent(LogEvent):
    """A build or progression step the rules refused."""

    code: str = ""
    message: str = ""
    subject_id: str = ""

    def __post_init__(self):
        self.event_type = EventType.RULE_CHECK

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update({"code": self.code, "message": self.message, "subject_id": self.subject_id})
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleCheckEvent":
        return cls(
            code=data.get("code", ""),
            message=data.get("message", ""),
            subject_id=data.get("subject_id", ""),
            **cls._base_kwargs(data),
        )

    def __str__(self) -> str:
        return f"[{self.sequence_number}] RULE {self.code}: {self.message}"


_EVENT_CLASSES: dict[EventType, type] = {
    EventType.ROLL: RollEvent,
    EventType.TRANSITION: TransitionEvent,
    EventType.TURN: TurnEvent,
    EventType.RULE_CHECK: RuleCheckEvent,
}


class RunLog:
    """
    Central run log for all session events.

    Singleton pattern - use get_run_log() to access.
    """

    _instance: Optional["RunLog"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._events: list[LogEvent] = []
        self._sequence: int = 0
        self._seed: Optional[int] = None
        self._session_start: datetime = datetime.now()
        self._subscribers: list[Callable[[LogEvent], None]] = []
        self._paused: bool = False

    def reset(self) -> None:
        """Reset the log for a new session."""
        self._events = []
        self._sequence = 0
        self._session_start = datetime.now()
        logger.info("RunLog reset")

    def set_seed(self, seed: int) -> None:
        """Record the RNG seed used for this session."""
        self._seed = seed
        logger.info(f"RunLog seed set: {seed}")

    def get_seed(self) -> Optional[int]:
        return self._seed

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def is_paused(self) -> bool:
        return self._paused

    def subscribe(self, callback: Callable[[LogEvent], None]) -> None:
        """Subscribe to receive events as they are logged."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[LogEvent], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _record(self, event: LogEvent) -> LogEvent:
        """Number and store an event, then notify subscribers. No-op while paused."""
        if self._paused:
            return event
        self._sequence += 1
        event.sequence_number = self._sequence
        self._events.append(event)
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception as e:
                logger.warning(f"RunLog subscriber failed on {event.event_type.value} event: {e}")
        return event

    def _of_type(self, event_class: type) -> list:
        return [e for e in self._events if isinstance(e, event_class)]

    def log_roll(
        self,
        notation: str,
        rolls: list[int],
        modifier: int,
        total: int,
        reason: str = "",
        context: Optional[dict[str, Any]] = None,
    ) -> RollEvent:
        """Log a dice roll."""
        return self._record(
            RollEvent(
                notation=notation, rolls=list(rolls), modifier=modifier, total=total, reason=reason, context=context or {}
            )
        )

    def log_transition(
        self,
        encounter_id: str,
        from_state: str,
        to_state: str,
        trigger: str,
        context: Optional[dict[str, Any]] = None,
    ) -> TransitionEvent:
        """Log an encounter phase transition."""
        return self._record(
            TransitionEvent(
                encounter_id=encounter_id, from_state=from_state, to_state=to_state, trigger=trigger, context=context or {}
            )
        )

    def log_turn(
        self,
        encounter_id: str,
        round: int,
        participant_id: str,
        participant_name: str = "",
        new_round: bool = False,
        expired_effects: Optional[list[str]] = None,
    ) -> TurnEvent:
        """Log an encounter turn advance."""
        return self._record(
            TurnEvent(
                encounter_id=encounter_id,
                round=round,
                participant_id=participant_id,
                participant_name=participant_name,
                new_round=new_round,
                expired_effects=list(expired_effects or []),
            )
        )

    def log_rule_check(
        self,
        code: str,
        message: str,
        subject_id: str = "",
        context: Optional[dict[str, Any]] = None,
    ) -> RuleCheckEvent:
        """Log a refused rule check."""
        return self._record(RuleCheckEvent(code=code, message=message, subject_id=subject_id, context=context or {}))

    def get_events(
        self,
        event_type: Optional[EventType] = None,
        since_sequence: int = 0,
    ) -> list[LogEvent]:
        """
        Get logged events.

        Args:
            event_type: Filter by event type (None = all)
            since_sequence: Only events after this sequence number
        """
        events = [e for e in self._events if e.sequence_number > since_sequence]
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        return events

    def get_rolls(self) -> list[RollEvent]:
        return self._of_type(RollEvent)

    def get_transitions(self) -> list[TransitionEvent]:
        return self._of_type(TransitionEvent)

    def get_turns(self) -> list[TurnEvent]:
        return self._of_type(TurnEvent)

    def get_rule_checks(self) -> list[RuleCheckEvent]:
        return self._of_type(RuleCheckEvent)

    def get_event_count(self) -> int:
        return len(self._events)

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of the run log."""
        return {
            "session_start": self._session_start.isoformat(),
            "seed": self._seed,
            "total_events": len(self._events),
            "rolls": len(self.get_rolls()),
            "transitions": len(self.get_transitions()),
            "turns": len(self.get_turns()),
            "rule_checks": len(self.get_rule_checks()),
            "last_sequence": self._sequence,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize the entire log to a dictionary."""
        return {
            "session_start": self._session_start.isoformat(),
            "seed": self._seed,
            "sequence": self._sequence,
            "events": [e.to_dict() for e in self._events],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def save(self, filepath: str) -> None:
        """Save the log to a file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.to_json())
        logger.info(f"RunLog saved to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> "RunLog":
        """Load a log from a file into the global instance."""
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)

        log = get_run_log()
        log.reset()
        log._session_start = datetime.fromisoformat(data["session_start"])
        log._seed = data.get("seed")
        log._sequence = data.get("sequence", 0)

        for event_data in data.get("events", []):
            event_class = _EVENT_CLASSES.get(EventType(event_data["event_type"]), LogEvent)
            log._events.append(event_class.from_dict(event_data))

        logger.info(f"RunLog loaded from {filepath}: {len(log._events)} events")
        return log

    def format_log(
        self,
        event_types: Optional[list[EventType]] = None,
        max_events: Optional[int] = None,
    ) -> str:
        """
        Format the log as a human-readable string.

        Args:
            event_types: Filter by event types (None = all)
            max_events: Maximum number of most recent events to include
        """
        lines = [
            "=== Run Log ===",
            f"Session: {self._session_start.isoformat()}",
            f"Seed: {self._seed if self._seed is not None else 'not set'}",
            f"Total Events: {len(self._events)}",
            "",
        ]

        events = self._events
        if event_types:
            events = [e for e in events if e.event_type in event_types]
        if max_events:
            events = events[-max_events:]

        for event in events:
            lines.append(str(event))

        return "\n".join(lines)


# Singleton access
_run_log: Optional[RunLog] = None


def get_run_log() -> RunLog:
    """Get the global RunLog instance."""
    global _run_log
    if _run_log is None:
        _run_log = RunLog()
    return _run_log


def reset_run_log() -> RunLog:
    """Reset and return the global RunLog instance."""
    log = get_run_log()
    log.reset()
    return log
