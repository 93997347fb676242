"""LinkedIn public job search through a Playwright browser session.

Companies posting jobs for a term become candidates; each company's page is
visited once for its description and technology indicators. Every page load
goes through throttle() so the randomized delay applies between them.
"""
from __future__ import annotations

import os
from pathlib import Path
from urllib.parse import quote_plus

from prospect_intel.log import get_logger
from prospect_intel.models import CandidateRecord
from prospect_intel.sources.base import SourceAdapter, detect_tech_stack

log = get_logger(__name__)

SEARCH_URL = "https://www.linkedin.com/jobs/search/?keywords={}"
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

_CARDS_JS = """cards => cards.map(card => ({
    title: card.querySelector('.base-search-card__title')?.innerText?.trim() || '',
    company: card.querySelector('.base-search-card__subtitle')?.innerText?.trim() || '',
    location: card.querySelector('.job-search-card__location')?.innerText?.trim() || '',
    companyUrl: card.querySelector('.base-search-card__subtitle a')?.href || ''
}))"""


def parse_job_cards(cards: list[dict]) -> list[CandidateRecord]:
    """Group raw job cards by company, keeping first-seen order."""
    by_company: dict[str, CandidateRecord] = {}
    for card in cards:
        company = (card.get("company") or "").strip()
        if not company:
            continue
        title = (card.get("title") or "").strip()
        record = by_company.get(company)
        if record is None:
            url = (card.get("companyUrl") or "").split("?")[0] or None
            record = CandidateRecord(
                company=company,
                industry="Unknown",
                size="unknown",
                description="",
                website=url,
                source="linkedin",
            )
            by_company[company] = record
        if title and title not in record.job_postings:
            record.job_postings.append(title)

    for record in by_company.values():
        record.description = f"Hiring for: {', '.join(record.job_postings)}" if record.job_postings else ""
    return list(by_company.values())


class LinkedInJobsSource(SourceAdapter):
    name = "linkedin"

    def __init__(self, *, headless: bool = True, max_companies: int = 10, **kwargs) -> None:
        super().__init__(**kwargs)
        self.headless = headless
        self.max_companies = max_companies
        self._playwright = None
        self._browser = None
        self._page = None

    def _ensure_page(self):
        if self._page is not None:
            return self._page
        _pw = os.environ.get("PLAYWRIGHT_BROWSERS_PATH", "")
        if _pw and not Path(_pw).exists():
            os.environ.pop("PLAYWRIGHT_BROWSERS_PATH", None)
        from playwright.sync_api import sync_playwright

        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=self.headless, args=["--no-sandbox", "--disable-setuid-sandbox"]
            )
            context = self._browser.new_context(
                viewport={"width": 1280, "height": 900}, user_agent=USER_AGENT
            )
            page = context.new_page()
            page.set_default_timeout(20_000)
        except Exception:
            # Driver is already running; stop it before the next term starts another
            self._release()
            raise
        self._page = page
        log.info("LinkedIn browser session opened (headless=%s)", self.headless)
        return self._page

    def _search_term(self, term: str) -> list[CandidateRecord]:
        page = self._ensure_page()
        self.throttle()
        page.goto(SEARCH_URL.format(quote_plus(term)), wait_until="domcontentloaded", timeout=25_000)
        cards = page.eval_on_selector_all(".base-search-card", _CARDS_JS)
        candidates = parse_job_cards(cards)[: self.max_companies]
        for candidate in candidates:
            if candidate.website:
                self._enrich_from_company_page(candidate)
        return candidates

    def _enrich_from_company_page(self, candidate: CandidateRecord) -> None:
        page = self._ensure_page()
        self.throttle()
        try:
            page.goto(candidate.website, wait_until="domcontentloaded", timeout=25_000)
            meta = page.locator('meta[name="description"]')
            description = meta.first.get_attribute("content") if meta.count() else ""
            body = page.inner_text("body")
        except Exception as exc:
            log.warning("Company page for %s unavailable: %s", candidate.company, str(exc)[:120])
            return
        if description:
            candidate.description = description.strip()
        for tech in detect_tech_stack(body):
            if tech not in candidate.tech_stack:
                candidate.tech_stack.append(tech)

    def _release(self) -> None:
        if self._browser is not None:
            try:
                self._browser.close()
            except Exception as exc:
                log.warning("Browser close failed: %s", exc)
        if self._playwright is not None:
            try:
                self._playwright.stop()
            except Exception as exc:
                log.warning("Playwright stop failed: %s", exc)
        if self._page is not None:
            log.debug("LinkedIn browser session closed")
        self._playwright = self._browser = self._page = None

    def close(self) -> None:
        self._release()
        super().close()
