"""Remotive: companies hiring for remote roles (free API, no key required).

Docs: https://remotive.com/api/remote-jobs
"""
from __future__ import annotations

import html
import re

import requests

from prospect_intel.log import get_logger
from prospect_intel.models import CandidateRecord
from prospect_intel.retry import retry
from prospect_intel.sources.base import SourceAdapter, detect_tech_stack

log = get_logger(__name__)

API_URL = "https://remotive.com/api/remote-jobs"
_TAG_RE = re.compile(r"<[^>]+>")
_DESCRIPTION_LIMIT = 600


def _plain_text(fragment: str) -> str:
    text = html.unescape(_TAG_RE.sub(" ", fragment or ""))
    return " ".join(text.split())


def group_by_company(hits: list[dict]) -> list[CandidateRecord]:
    """Collapse job hits into one candidate per company, in first-seen order."""
    by_company: dict[str, CandidateRecord] = {}
    for hit in hits:
        company = (hit.get("company_name") or "").strip()
        if not company:
            continue
        title = (hit.get("title") or "").strip()
        tags = [t.lower() for t in hit.get("tags", []) if isinstance(t, str)]
        desc = _plain_text(hit.get("description", ""))

        record = by_company.get(company)
        if record is None:
            record = CandidateRecord(
                company=company,
                industry=hit.get("category") or "Unknown",
                size="unknown",
                description=desc[:_DESCRIPTION_LIMIT],
                source="remotive",
            )
            by_company[company] = record
        if title and title not in record.job_postings:
            record.job_postings.append(title)
        for tech in tags + detect_tech_stack(desc):
            if tech not in record.tech_stack:
                record.tech_stack.append(tech)
    return list(by_company.values())


class RemotiveSource(SourceAdapter):
    name = "remotive"

    def __init__(self, *, limit: int = 20, timeout: float = 15, **kwargs) -> None:
        super().__init__(**kwargs)
        self.limit = limit
        self.timeout = timeout
        self._session: requests.Session | None = None

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers["Accept"] = "application/json"
        return self._session

    @retry(max_attempts=2, base_delay=1.5, retryable=(requests.RequestException, OSError))
    def _fetch(self, term: str) -> list[dict]:
        r = self._get_session().get(
            API_URL, params={"search": term, "limit": self.limit}, timeout=self.timeout
        )
        r.raise_for_status()
        return r.json().get("jobs", [])

    def _search_term(self, term: str) -> list[CandidateRecord]:
        self.throttle()
        return group_by_company(self._fetch(term))

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
            log.debug("Remotive session closed")
        super().close()
