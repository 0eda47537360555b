from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, DefaultDict, Iterator

from hds.contracts import EventType, MatchEvent, Side
from hds.core.ids import now_utc

MatchEventHandler = Callable[[MatchEvent], None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: list[MatchEventHandler] = []
        self._counter: DefaultDict[str, int] = defaultdict(int)

    def subscribe(self, handler: MatchEventHandler) -> None:
        self._handlers.append(handler)

    def publish(self, event: MatchEvent) -> None:
        self._counter[event.event_type.value] += 1
        for handler in self._handlers:
            handler(event)

    def emitted_count(self, event_type: EventType | str | None = None) -> int:
        if event_type is None:
            return sum(self._counter.values())
        key = event_type.value if isinstance(event_type, EventType) else event_type
        return self._counter[key]


class MatchEventLog:
    """Append-only, sequence-numbered audit trail of one match."""

    def __init__(self, bus: EventBus | None = None) -> None:
        self._events: list[MatchEvent] = []
        self._bus = bus

    def append(
        self,
        *,
        round_number: int,
        quarter: int,
        possession: Side,
        event_type: EventType,
        description: str,
        details: dict[str, Any] | None = None,
        home_score: int,
        away_score: int,
        narration: str | None = None,
    ) -> MatchEvent:
        event = MatchEvent(
            sequence=len(self._events) + 1,
            round=round_number,
            quarter=quarter,
            possession=possession,
            event_type=event_type,
            description=description,
            details=dict(details or {}),
            home_score=home_score,
            away_score=away_score,
            timestamp=now_utc(),
            narration=narration,
        )
        self._events.append(event)
        if self._bus is not None:
            self._bus.publish(event)
        return event

    def of_type(self, event_type: EventType) -> list[MatchEvent]:
        return [e for e in self._events if e.event_type is event_type]

    def tail(self, count: int) -> list[MatchEvent]:
        return self._events[-count:] if count > 0 else []

    def snapshot(self) -> list[MatchEvent]:
        return list(self._events)

    def __iter__(self) -> Iterator[MatchEvent]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)
