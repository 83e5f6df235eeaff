"""Console sink for debugging and development."""

from collections import Counter
from typing import Any

from estate_registry.models import LifecycleEvent
from estate_registry.sinks.serialization import to_json


class ConsoleSink:
    """Print events and exports to stdout.

    Parameters
    ----------
    pretty : bool
        Indent JSON payloads.
    max_records : int | None
        Maximum records printed per export batch (None for all).
    """

    def __init__(self, pretty: bool = True, max_records: int | None = None) -> None:
        self.pretty = pretty
        self.max_records = max_records
        self.events: Counter[str] = Counter()
        self.exports: Counter[str] = Counter()

    def publish(self, topic: str, event: LifecycleEvent) -> None:
        """Print one event as ``t=<tick> [<topic>] <type> <subject> <data>``."""
        print(
            f"t={event.logical_time} [{topic}] {event.event_type} {event.subject} "
            f"{to_json(event.data, self.pretty)}"
        )
        self.events[event.event_type] += 1

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Print an export, truncated to ``max_records``."""
        shown = records if self.max_records is None else records[: self.max_records]
        print(f"--- {entity_type}: {len(records)} records ---")
        for record in shown:
            print(to_json(record, self.pretty))
        hidden = len(records) - len(shown)
        if hidden:
            print(f"... and {hidden} more records")
        self.exports[entity_type] += len(records)

    def close(self) -> None:
        """Print totals by event type and by exported entity."""
        print("--- console sink summary ---")
        for event_type, count in sorted(self.events.items()):
            print(f"  event {event_type}: {count}")
        for entity_type, count in sorted(self.exports.items()):
            print(f"  export {entity_type}: {count} records")
