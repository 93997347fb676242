"""Data models for candidates, scores and persisted prospects."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from prospect_intel.errors import InvalidArgument


class Status(str, Enum):
    DISCOVERED = "discovered"
    ANALYZED = "analyzed"
    CONTACTED = "contacted"
    RESPONDED = "responded"
    QUALIFIED = "qualified"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: "Status | str") -> "Status":
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise InvalidArgument(f"Invalid status {value!r} (expected one of: {valid})") from None


@dataclass
class CandidateRecord:
    company: str
    industry: str
    size: str
    description: str
    job_postings: list[str] = field(default_factory=list)
    tech_stack: list[str] = field(default_factory=list)
    website: str | None = None
    issues: list[str] = field(default_factory=list)
    source: str = "unknown"

    def with_issues(self, issues: list[str]) -> "CandidateRecord":
        return replace(self, issues=list(issues))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CandidateRecord":
        """Build from snake_case or the camelCase keys of the old JSON API."""
        def pick(*keys: str) -> Any:
            for k in keys:
                if data.get(k) is not None:
                    return data[k]
            return None

        def pick_list(*keys: str) -> list[str]:
            value = pick(*keys)
            if isinstance(value, str):
                return [value]
            return list(value or [])

        return cls(
            company=str(pick("company") or ""),
            industry=str(pick("industry") or ""),
            size=str(pick("size") or ""),
            description=str(pick("description") or ""),
            job_postings=pick_list("job_postings", "jobPostings"),
            tech_stack=pick_list("tech_stack", "techStack"),
            website=pick("website"),
            issues=pick_list("issues", "painPoints", "pain_points"),
            source=str(pick("source") or "unknown"),
        )


@dataclass(frozen=True)
class Score:
    urgency: int
    budget: int
    fit: int
    contactability: int
    composite: int
    rationale: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "urgency": self.urgency,
            "budget": self.budget,
            "fit": self.fit,
            "contactability": self.contactability,
            "composite": self.composite,
            "rationale": self.rationale,
        }


@dataclass
class PersistedProspect:
    id: str
    candidate: CandidateRecord
    status: Status
    created_at: datetime
    updated_at: datetime
    score: Score | None = None
    outreach_message: str | None = None
    last_contacted_at: datetime | None = None


@dataclass
class ProspectResult:
    """One candidate as the pipeline persisted it."""

    id: str
    candidate: CandidateRecord
    score: Score
    outreach_message: str | None
    status: Status

    def to_dict(self) -> dict[str, Any]:
        c = self.candidate
        return {
            "id": self.id,
            "company": c.company,
            "industry": c.industry,
            "size": c.size,
            "website": c.website,
            "issues": list(c.issues),
            "score": self.score.to_dict(),
            "outreachMessage": self.outreach_message,
            "status": self.status.value,
        }


@dataclass
class BatchResult:
    processed_count: int
    qualified: list[ProspectResult]
    failures: list = field(default_factory=list)
    cancelled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "processedCount": self.processed_count,
            "qualified": [p.to_dict() for p in self.qualified],
            "failures": [{"company": f.company, "error": str(f.cause)} for f in self.failures],
            "cancelled": self.cancelled,
        }
