from __future__ import annotations

import json
from dataclasses import asdict

import pytest
from conftest import FakeTransport, make_candidate, score_json

from prospect_intel.errors import OracleUnavailable
from prospect_intel.models import Score
from prospect_intel.oracle import (
    FALLBACK_MESSAGE,
    FALLBACK_SCORE,
    GENERIC_ISSUES,
    JudgmentOracleClient,
    OpenAITransport,
    parse_json_reply,
)

SCORE = Score(urgency=85, budget=60, fit=75, contactability=50, composite=70, rationale="")


# --- score_candidate ---------------------------------------------------------

def test_score_fallback_on_unparseable_reply():
    client = JudgmentOracleClient(FakeTransport(score="I think they score about 80 overall."))

    score = client.score_candidate(make_candidate("Acme"))

    assert score == FALLBACK_SCORE
    assert (score.urgency, score.budget, score.fit, score.contactability, score.composite) == (20,) * 5
    assert score.rationale == "analysis failed — manual review needed"


def test_score_fallback_on_schema_violation():
    client = JudgmentOracleClient(FakeTransport(score=score_json(urgency=150)))

    assert client.score_candidate(make_candidate("Acme")) == FALLBACK_SCORE


def test_score_fallback_when_transport_fails():
    client = JudgmentOracleClient(FakeTransport(score=OracleUnavailable("down")))

    assert client.score_candidate(make_candidate("Acme")) == FALLBACK_SCORE


def test_score_repairs_code_fenced_reply():
    reply = "```json\n" + score_json(composite=72) + "\n```"
    client = JudgmentOracleClient(FakeTransport(score=reply))

    score = client.score_candidate(make_candidate("Acme"))

    assert score.composite == 72
    assert score.rationale == "ok"


def test_score_extracts_object_from_prose():
    reply = "Here is the analysis:\n" + score_json() + "\nLet me know if you need more."
    client = JudgmentOracleClient(FakeTransport(score=reply))

    assert client.score_candidate(make_candidate("Acme")).composite == 67


def test_score_prompt_embeds_context_and_leaves_candidate_untouched():
    transport = FakeTransport(score=score_json())
    client = JudgmentOracleClient(transport)
    candidate = make_candidate(
        "Acme", job_postings=["Support Lead"], tech_stack=["zendesk"], website="https://acme.test"
    )
    before = asdict(candidate)

    client.score_candidate(candidate)

    call = transport.calls[0]
    assert call["json_mode"] is True
    for fragment in ("Company: Acme", "Industry: SaaS", "Size: 11-50 employees", "Support Lead", "zendesk"):
        assert fragment in call["prompt"]
    assert asdict(candidate) == before


# --- draft_outreach ----------------------------------------------------------

def test_draft_returns_fallback_when_call_fails():
    client = JudgmentOracleClient(FakeTransport(draft=RuntimeError("rate limited")))

    assert client.draft_outreach(make_candidate("Acme"), SCORE) == "Error generating personalized message"


def test_draft_returns_fallback_on_empty_reply():
    client = JudgmentOracleClient(FakeTransport(draft="   "))

    assert client.draft_outreach(make_candidate("Acme"), SCORE) == FALLBACK_MESSAGE


def test_draft_strips_wrapping_quotes():
    client = JudgmentOracleClient(FakeTransport(draft='"Hi Acme team, noticed your support queue."'))

    assert client.draft_outreach(make_candidate("Acme"), SCORE) == "Hi Acme team, noticed your support queue."


def test_draft_prompt_carries_issues_scores_and_constraints():
    transport = FakeTransport(draft="Hello")
    client = JudgmentOracleClient(transport)

    client.draft_outreach(make_candidate("Acme", issues=["Ticket backlog"]), SCORE)

    prompt = transport.calls[0]["prompt"]
    assert "Pain Points: Ticket backlog" in prompt
    assert "Urgency Score: 85/100" in prompt
    assert "Fit Score: 75/100" in prompt
    assert "Maximum 150 words" in prompt


def test_draft_prompt_marks_unknown_issues():
    transport = FakeTransport(draft="Hello")

    JudgmentOracleClient(transport).draft_outreach(make_candidate("Acme"), SCORE)

    assert "Pain Points: Unknown" in transport.calls[0]["prompt"]


# --- identify_issues ---------------------------------------------------------

def test_issues_from_bare_array():
    client = JudgmentOracleClient(FakeTransport(issues=json.dumps(["Ticket backlog", "Manual data entry"])))

    assert client.identify_issues("desc", "SaaS") == ["Ticket backlog", "Manual data entry"]


def test_issues_from_object_capped_and_cleaned():
    payload = {"issues": [" A ", "B", 3, "", "C", "D", "E", "F"]}
    client = JudgmentOracleClient(FakeTransport(issues=json.dumps(payload)))

    assert client.identify_issues("desc", "SaaS") == ["A", "B", "C", "D", "E"]


def test_issues_generic_fallback_on_parse_failure():
    client = JudgmentOracleClient(FakeTransport(issues="Customer service, probably."))

    assert client.identify_issues("desc", "SaaS") == list(GENERIC_ISSUES)


def test_issues_generic_fallback_on_wrong_shape():
    client = JudgmentOracleClient(FakeTransport(issues=json.dumps({"problems": "many"})))

    assert client.identify_issues("desc", "SaaS") == list(GENERIC_ISSUES)


def test_issues_empty_on_transport_failure():
    client = JudgmentOracleClient(FakeTransport(issues=ConnectionError("reset")))

    assert client.identify_issues("desc", "SaaS") == []


def test_issues_empty_on_empty_reply():
    client = JudgmentOracleClient(FakeTransport(issues=""))

    assert client.identify_issues("desc", "SaaS") == []


# --- transport and parsing ---------------------------------------------------

def test_openai_transport_without_key_is_unavailable():
    transport = OpenAITransport(api_key="")

    with pytest.raises(OracleUnavailable):
        transport.complete("sys", "prompt", temperature=0.3, max_tokens=10)

    client = JudgmentOracleClient(transport)
    assert client.score_candidate(make_candidate("Acme")) == FALLBACK_SCORE
    assert client.draft_outreach(make_candidate("Acme"), SCORE) == FALLBACK_MESSAGE
    assert client.identify_issues("desc", "SaaS") == []


def test_parse_json_reply_handles_fenced_array():
    assert parse_json_reply('```\n["a", "b"]\n```') == ["a", "b"]
