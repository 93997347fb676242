"""Source adapter contract: per-term acquisition, throttling, scoped session."""
from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from typing import Callable, Sequence

from prospect_intel.errors import AcquisitionFailure
from prospect_intel.log import get_logger
from prospect_intel.models import CandidateRecord

log = get_logger(__name__)

DEFAULT_DELAY_MS: tuple[int, int] = (2000, 4000)

TECH_KEYWORDS: tuple[str, ...] = (
    "react", "node", "python", "aws", "api", "saas", "cloud",
    "salesforce", "zendesk", "hubspot", "kubernetes",
)


def detect_tech_stack(text: str) -> list[str]:
    """Technology indicators mentioned anywhere in *text*."""
    low = (text or "").lower()
    return [kw for kw in TECH_KEYWORDS if kw in low]


class SourceAdapter(ABC):
    name = "source"

    def __init__(
        self,
        *,
        delay_ms: tuple[int, int] = DEFAULT_DELAY_MS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        low, high = delay_ms
        if low < 0 or low > high:
            raise ValueError(f"Invalid delay bounds: {delay_ms}")
        self.delay_ms = (low, high)
        self._sleep = sleep
        self._requests_made = 0
        self.closed = False

    def throttle(self) -> None:
        """Randomized pause before a network-bound operation (not before the first)."""
        if self._requests_made:
            low, high = self.delay_ms
            if high > 0:
                self._sleep(random.uniform(low, high) / 1000.0)
        self._requests_made += 1

    def search(self, terms: Sequence[str]) -> list[CandidateRecord]:
        results: list[CandidateRecord] = []
        for term in terms:
            try:
                batch = self._search_term(term)
            except Exception as exc:
                failure = AcquisitionFailure(self.name, term, exc)
                log.warning("[%s] %s", self.name, failure)
                continue
            log.debug("[%s] term=%r returned %d candidates", self.name, term, len(batch))
            results.extend(batch)
        log.info("[%s] %d candidate(s) for %d term(s)", self.name, len(results), len(terms))
        return results

    @abstractmethod
    def _search_term(self, term: str) -> list[CandidateRecord]:
        """Acquire candidates for one term; may raise, search() isolates it."""

    def close(self) -> None:
        """Release the session if one is open. Safe to call repeatedly."""
        self.closed = True

    def __enter__(self) -> "SourceAdapter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
