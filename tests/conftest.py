from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

import pytest

from prospect_intel.models import CandidateRecord, Score
from prospect_intel.prompts import ISSUES_SYSTEM_PROMPT, OUTREACH_SYSTEM_PROMPT, SCORE_SYSTEM_PROMPT
from prospect_intel.sources.base import SourceAdapter
from prospect_intel.store import ProspectStore


class FakeTransport:
    """Replies per task; a reply that is an exception is raised instead."""

    def __init__(self, *, score=None, issues=None, draft=None) -> None:
        self.replies = {
            SCORE_SYSTEM_PROMPT: score,
            ISSUES_SYSTEM_PROMPT: issues,
            OUTREACH_SYSTEM_PROMPT: draft,
        }
        self.calls: list[dict] = []

    def complete(self, system, prompt, *, temperature, max_tokens, json_mode=False):
        self.calls.append({"system": system, "prompt": prompt, "json_mode": json_mode})
        reply = self.replies[system]
        if isinstance(reply, BaseException):
            raise reply
        return reply if reply is not None else ""


class ScriptedOracle:
    """Oracle stand-in keyed by company name."""

    def __init__(self, composites: dict[str, int], *, fail_enrich: Sequence[str] = ()) -> None:
        self.composites = composites
        self.fail_enrich = set(fail_enrich)
        self.calls: list[tuple[str, str]] = []

    def identify_issues(self, description: str, industry: str) -> list[str]:
        company = description.split(":")[0]
        self.calls.append(("issues", company))
        if company in self.fail_enrich:
            raise RuntimeError(f"enrichment exploded for {company}")
        return ["Manual data entry"]

    def score_candidate(self, candidate: CandidateRecord) -> Score:
        self.calls.append(("score", candidate.company))
        c = self.composites.get(candidate.company, 50)
        return Score(urgency=c, budget=c, fit=c, contactability=c, composite=c, rationale="scripted")

    def draft_outreach(self, candidate: CandidateRecord, score: Score) -> str:
        self.calls.append(("draft", candidate.company))
        return f"Hi {candidate.company}, quick idea about {candidate.issues[0] if candidate.issues else 'ops'}."


class RecordingSource(SourceAdapter):
    name = "recording"

    def __init__(self, candidates: Sequence[CandidateRecord]) -> None:
        super().__init__(delay_ms=(0, 0))
        self.candidates = list(candidates)
        self.search_calls: list[list[str]] = []
        self.close_calls = 0

    def search(self, terms):
        self.search_calls.append(list(terms))
        return list(self.candidates)

    def _search_term(self, term):
        return list(self.candidates)

    def close(self) -> None:
        self.close_calls += 1
        super().close()


def make_candidate(company: str, **overrides) -> CandidateRecord:
    fields = {
        "company": company,
        "industry": "SaaS",
        "size": "11-50 employees",
        "description": f"{company}: support team drowning in tickets",
    }
    fields.update(overrides)
    return CandidateRecord(**fields)


def score_json(**values) -> str:
    payload = {"urgency": 80, "budget": 60, "fit": 70, "contactability": 50, "rationale": "ok"}
    payload.update(values)
    return json.dumps(payload)


@pytest.fixture
def store(tmp_path: Path) -> ProspectStore:
    return ProspectStore(tmp_path / "prospects.csv")
