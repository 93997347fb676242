from __future__ import annotations

import pytest

from prospect_intel import score_model
from prospect_intel.errors import OracleContractViolation, SchemaError
from prospect_intel.models import Score


def test_composite_is_weighted_sum_when_absent():
    score = score_model.validate({"urgency": 90, "budget": 85, "fit": 75, "contactability": 40})

    # 27 + 25.5 + 18.75 + 6 = 77.25
    assert score.composite == 77
    assert score.composite == round(0.30 * 90 + 0.30 * 85 + 0.25 * 75 + 0.15 * 40)
    assert score.rationale == ""


@pytest.mark.parametrize(
    "u,b,f,c",
    [(0, 0, 0, 0), (100, 100, 100, 100), (80, 60, 70, 50), (13, 97, 41, 66), (1, 2, 3, 4)],
)
def test_composite_matches_formula(u, b, f, c):
    score = score_model.validate({"urgency": u, "budget": b, "fit": f, "contactability": c})

    assert score.composite == round(0.30 * u + 0.30 * b + 0.25 * f + 0.15 * c)


def test_oracle_composite_is_trusted_over_formula():
    score = score_model.validate(
        {"urgency": 80, "budget": 60, "fit": 70, "contactability": 50, "composite": 55}
    )

    assert score_model.compute_composite(score) == 67
    assert score.composite == 55


def test_null_composite_is_recomputed():
    score = score_model.validate(
        {"urgency": 80, "budget": 60, "fit": 70, "contactability": 50, "composite": None}
    )

    assert score.composite == 67


def test_rejects_out_of_range_urgency():
    with pytest.raises(SchemaError):
        score_model.validate({"urgency": 150, "budget": 60, "fit": 70, "contactability": 50})


def test_rejects_missing_budget():
    with pytest.raises(SchemaError, match="budget"):
        score_model.validate({"urgency": 80, "fit": 70, "contactability": 50})


@pytest.mark.parametrize("bad", ["high", True, None, [50], float("nan"), -1])
def test_rejects_non_numeric_or_negative(bad):
    with pytest.raises(SchemaError):
        score_model.validate({"urgency": 80, "budget": bad, "fit": 70, "contactability": 50})


def test_rejects_invalid_oracle_composite():
    with pytest.raises(SchemaError, match="composite"):
        score_model.validate(
            {"urgency": 80, "budget": 60, "fit": 70, "contactability": 50, "composite": 101}
        )


def test_rejects_non_mapping_payload():
    with pytest.raises(SchemaError):
        score_model.validate([80, 60, 70, 50])


def test_schema_error_is_a_contract_violation():
    assert issubclass(SchemaError, OracleContractViolation)


def test_accepts_numeric_strings_and_legacy_keys():
    score = score_model.validate(
        {
            "urgency": "85",
            "budget": 70.0,
            "fitScore": 90,
            "contactability": 60,
            "overallScore": 80,
            "reasoning": "Growing support org",
        }
    )

    assert score == Score(
        urgency=85, budget=70, fit=90, contactability=60, composite=80, rationale="Growing support org"
    )


def test_compute_composite_is_idempotent():
    score = Score(urgency=33, budget=47, fit=91, contactability=12, composite=0)

    first = score_model.compute_composite(score)
    second = score_model.compute_composite(score)

    assert first == second == round(0.30 * 33 + 0.30 * 47 + 0.25 * 91 + 0.15 * 12)


def test_compute_composite_accepts_mapping():
    assert score_model.compute_composite(
        {"urgency": 100, "budget": 0, "fit": 0, "contactability": 0}
    ) == 30


@pytest.mark.parametrize("bad", [100.4, -0.4, "100.01"])
def test_rejects_fractional_values_just_outside_range(bad):
    with pytest.raises(SchemaError, match="urgency"):
        score_model.validate({"urgency": bad, "budget": 60, "fit": 70, "contactability": 50})


def test_fractional_values_round_half_up():
    score = score_model.validate(
        {"urgency": 54.5, "budget": 62.5, "fit": "70.5", "contactability": 49.4, "composite": 66.5}
    )

    assert (score.urgency, score.budget, score.fit, score.contactability) == (55, 63, 71, 49)
    assert score.composite == 67
