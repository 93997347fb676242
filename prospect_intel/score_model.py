"""Validate raw score payloads and compute the weighted composite."""
from __future__ import annotations

import math
from typing import Any, Mapping

from prospect_intel.errors import SchemaError
from prospect_intel.models import Score

SUB_SCORES: tuple[str, ...] = ("urgency", "budget", "fit", "contactability")

WEIGHTS: dict[str, float] = {
    "urgency": 0.30,
    "budget": 0.30,
    "fit": 0.25,
    "contactability": 0.15,
}

# Key names used by the older prompt format
_ALIASES: dict[str, str] = {
    "fitScore": "fit",
    "fit_score": "fit",
    "overallScore": "composite",
    "overall_score": "composite",
    "reasoning": "rationale",
}


def _normalize_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in raw.items():
        canonical = _ALIASES.get(key, key)
        if canonical in out and key != canonical:
            continue
        out[canonical] = value
    return out


def _round_half_up(value: float) -> int:
    # round() would send 62.5 to 62
    return int(math.floor(value + 0.5 + 1e-9))


def _as_bounded_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise SchemaError(f"{name} must be numeric, got {value!r}")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise SchemaError(f"{name} must be numeric, got {value!r}") from None
    if not isinstance(value, (int, float)) or (isinstance(value, float) and not math.isfinite(value)):
        raise SchemaError(f"{name} must be numeric, got {value!r}")
    if not 0 <= value <= 100:
        raise SchemaError(f"{name} must be within [0, 100], got {value!r}")
    return _round_half_up(value)


def compute_composite(score: Score | Mapping[str, Any]) -> int:
    """Weighted sum of the four sub-scores, rounded to the nearest integer."""
    if isinstance(score, Score):
        values = {name: getattr(score, name) for name in SUB_SCORES}
    else:
        values = {name: score[name] for name in SUB_SCORES}
    total = sum(WEIGHTS[name] * values[name] for name in SUB_SCORES)
    return _round_half_up(total)


def validate(raw: Any) -> Score:
    """Turn an oracle payload into a Score or raise SchemaError.

    An oracle-supplied composite that validates is kept as-is, even when it
    disagrees with the weighted formula.
    """
    if not isinstance(raw, Mapping):
        raise SchemaError(f"Score payload must be an object, got {type(raw).__name__}")
    data = _normalize_keys(raw)

    values: dict[str, int] = {}
    for name in SUB_SCORES:
        if data.get(name) is None:
            raise SchemaError(f"Score payload is missing {name!r}")
        values[name] = _as_bounded_int(name, data[name])

    if data.get("composite") is not None:
        composite = _as_bounded_int("composite", data["composite"])
    else:
        composite = compute_composite(values)

    rationale = data.get("rationale")
    return Score(
        composite=composite,
        rationale="" if rationale is None else str(rationale),
        **values,
    )
