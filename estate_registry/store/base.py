"""Checkpoint helpers shared by the stores."""

from typing import Any


def restore_records(current: dict[Any, Any], saved: dict[Any, Any]) -> None:
    """Bring ``current`` back to ``saved`` without replacing surviving records.

    Records present in both keep their identity and get their fields reset,
    so handles held by callers stay attached to the store. Records added
    since the checkpoint are dropped.
    """
    for key in list(current):
        if key not in saved:
            del current[key]
    for key, record in saved.items():
        if key in current:
            vars(current[key]).update(vars(record))
        else:
            current[key] = record
