"""Protocol implemented by every event sink."""

from typing import Any, Protocol

from estate_registry.models import LifecycleEvent


class EventSink(Protocol):
    """Destination for committed lifecycle events and state exports."""

    def publish(self, topic: str, event: LifecycleEvent) -> None: ...

    def write_batch(self, entity_type: str, records: list[Any]) -> None: ...

    def close(self) -> None: ...
