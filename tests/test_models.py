from __future__ import annotations

import pytest

from prospect_intel.errors import InvalidArgument
from prospect_intel.models import CandidateRecord, Status


def test_from_dict_accepts_camel_case_keys():
    record = CandidateRecord.from_dict(
        {
            "company": "Acme",
            "industry": "SaaS",
            "size": "11-50",
            "description": "Support desk",
            "jobPostings": ["Support Lead"],
            "techStack": ["zendesk"],
            "painPoints": ["Ticket backlog"],
        }
    )

    assert record.job_postings == ["Support Lead"]
    assert record.tech_stack == ["zendesk"]
    assert record.issues == ["Ticket backlog"]
    assert record.source == "unknown"


def test_from_dict_wraps_single_string_lists():
    record = CandidateRecord.from_dict(
        {
            "company": "Acme",
            "industry": "SaaS",
            "size": "11-50",
            "description": "Support desk",
            "jobPostings": "Support Lead",
            "tech_stack": "zendesk",
            "issues": "Ticket backlog",
        }
    )

    assert record.job_postings == ["Support Lead"]
    assert record.tech_stack == ["zendesk"]
    assert record.issues == ["Ticket backlog"]


def test_status_parse():
    assert Status.parse("contacted") is Status.CONTACTED
    assert Status.parse(Status.REJECTED) is Status.REJECTED
    with pytest.raises(InvalidArgument):
        Status.parse("ghosted")
