"""Fan a search out over several adapters, in order."""
from __future__ import annotations

from typing import Sequence

from prospect_intel.log import get_logger
from prospect_intel.models import CandidateRecord
from prospect_intel.sources.base import SourceAdapter

log = get_logger(__name__)


class MultiSource(SourceAdapter):
    name = "multi"

    def __init__(self, sources: Sequence[SourceAdapter]) -> None:
        super().__init__(delay_ms=(0, 0))
        self.sources = list(sources)

    def search(self, terms: Sequence[str]) -> list[CandidateRecord]:
        results: list[CandidateRecord] = []
        for source in self.sources:
            # Each child isolates its own terms; this guards against a broken adapter
            try:
                results.extend(source.search(terms))
            except Exception as exc:
                log.error("[%s] FAILED: %s", source.name, exc)
        return results

    def _search_term(self, term: str) -> list[CandidateRecord]:
        return self.search([term])

    def close(self) -> None:
        for source in self.sources:
            try:
                source.close()
            except Exception as exc:
                log.error("[%s] close failed: %s", source.name, exc)
        super().close()
