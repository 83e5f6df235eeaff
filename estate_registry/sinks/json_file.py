"""JSON file sink for exporting events and registry state to files."""

import json
from pathlib import Path
from typing import Any

from estate_registry.exceptions import SinkError
from estate_registry.models import LifecycleEvent
from estate_registry.sinks.serialization import to_dict_fast, to_json


class JsonFileSink:
    """Append events to JSON Lines files and write exports as JSON arrays."""

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file sink.

        Parameters
        ----------
        output_dir : str | Path
            Directory to write JSON files.
        pretty : bool
            Pretty-print JSON exports (event lines are always compact).
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    def publish(self, topic: str, event: LifecycleEvent) -> None:
        """Append an event to ``<topic>.jsonl`` (dots become underscores)."""
        file_path = self.output_dir / (topic.replace(".", "_") + ".jsonl")
        line = to_json(event)
        try:
            with open(file_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as exc:
            raise SinkError(f"Cannot write event to {file_path}: {exc}") from exc
        self._counts[topic] = self._counts.get(topic, 0) + 1

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records to a JSON file."""
        file_path = self.output_dir / f"{entity_type}.json"

        data = [to_dict_fast(record) for record in records]

        # Written beside the target and renamed, so readers never see half a file
        tmp_path = file_path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2 if self.pretty else None, ensure_ascii=False, default=str)
            tmp_path.replace(file_path)
        except OSError as exc:
            raise SinkError(f"Cannot write {entity_type} to {file_path}: {exc}") from exc

        self._counts[entity_type] = len(records)

    def close(self) -> None:
        """Print summary."""
        print(f"JSON files written to: {self.output_dir}")
        for entity_type, count in self._counts.items():
            print(f"  {entity_type}: {count} records")
