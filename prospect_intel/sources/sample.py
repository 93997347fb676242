"""Sample startup directory: deterministic candidates for tests and offline runs."""
from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from prospect_intel.log import get_logger
from prospect_intel.models import CandidateRecord
from prospect_intel.sources.base import SourceAdapter

log = get_logger(__name__)

SAMPLE_STARTUPS: tuple[CandidateRecord, ...] = (
    CandidateRecord(
        company="TechFlow Solutions",
        industry="SaaS",
        size="11-50 employees",
        description="Customer service automation platform",
        website="https://techflow.example.com",
        source="sample",
    ),
    CandidateRecord(
        company="DataSync Pro",
        industry="Data Analytics",
        size="51-200 employees",
        description="Business intelligence and reporting tools",
        website="https://datasync.example.com",
        source="sample",
    ),
    CandidateRecord(
        company="ClinicDesk Health",
        industry="Healthcare",
        size="51-200 employees",
        description="Patient scheduling and intake for multi-site clinics; front desk overwhelmed by calls",
        job_postings=["Patient Coordinator", "Front Desk Lead"],
        website="https://clinicdesk.example.com",
        source="sample",
    ),
    CandidateRecord(
        company="ShipRight Logistics",
        industry="Logistics",
        size="201-500 employees",
        description="Regional freight brokerage scaling its dispatch team, manual load matching",
        job_postings=["Dispatch Coordinator", "Operations Analyst"],
        tech_stack=["salesforce", "api"],
        source="sample",
    ),
)


class SampleSource(SourceAdapter):
    """Returns the fixed catalog in order, whatever the terms; never touches the network."""

    name = "sample"

    def __init__(self, records: Sequence[CandidateRecord] | None = None, **kwargs) -> None:
        kwargs.setdefault("delay_ms", (0, 0))
        super().__init__(**kwargs)
        self.records = tuple(records) if records is not None else SAMPLE_STARTUPS

    def search(self, terms: Sequence[str]) -> list[CandidateRecord]:
        log.info("SampleSource returning %d sample candidates", len(self.records))
        return [self._copy(r) for r in self.records]

    def _search_term(self, term: str) -> list[CandidateRecord]:
        return [self._copy(r) for r in self.records]

    @staticmethod
    def _copy(record: CandidateRecord) -> CandidateRecord:
        return replace(
            record,
            job_postings=list(record.job_postings),
            tech_stack=list(record.tech_stack),
            issues=list(record.issues),
        )
