"""Template normalization."""

from __future__ import annotations

from typing import Any


def normalize_template(template: dict[str, Any]) -> dict[str, Any]:
    """Return a canonical copy of a compiled template.

    Mapping keys are put in sorted order and tuples become lists. Values are
    otherwise untouched, and the input is never modified.
    """
    if not isinstance(template, dict):
        raise TypeError(
            f"Compiled template must be a mapping, got {type(template).__name__}"
        )
    return _normalize(template)


def _normalize(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _normalize(value[k]) for k in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    return value
