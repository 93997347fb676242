"""
Prospect intelligence pipeline.

Runs: discover → identify issues → score → (threshold) draft outreach → persist → report.
"""
from __future__ import annotations

import threading
from typing import Any, Protocol, Sequence

from prospect_intel.config import ensure_dirs, load_settings, load_targeting
from prospect_intel.errors import CandidatePipelineFailure, InvalidArgument, StorageError
from prospect_intel.log import batch_log, get_logger
from prospect_intel.models import BatchResult, CandidateRecord, ProspectResult, Score, Status
from prospect_intel.oracle import JudgmentOracleClient, OpenAITransport
from prospect_intel.sources import SourceAdapter, get_sources
from prospect_intel.store import ProspectStore

log = get_logger(__name__)

BATCH_DRAFT_THRESHOLD = 70
SINGLE_DRAFT_THRESHOLD = 60
REPORT_THRESHOLD = 60
DEFAULT_MAX_RESULTS = 10


class Store(Protocol):
    def create(self, candidate: CandidateRecord, score: Score | None = None) -> str: ...

    def set_outreach_message(self, prospect_id: str, text: str) -> None: ...


def _validate_terms(search_terms: Any) -> list[str]:
    if isinstance(search_terms, (str, bytes)) or not isinstance(search_terms, (list, tuple)):
        raise InvalidArgument("search_terms must be a list of strings")
    if not search_terms:
        raise InvalidArgument("search_terms must not be empty")
    if not all(isinstance(t, str) for t in search_terms):
        raise InvalidArgument("search_terms must contain only strings")
    return list(search_terms)


def _check_threshold(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument(f"{name} must be a number, got {value!r}")


class PipelineOrchestrator:
    def __init__(self, source: SourceAdapter, oracle: JudgmentOracleClient, store: Store) -> None:
        self.source = source
        self.oracle = oracle
        self.store = store

    def _score_and_persist(self, candidate: CandidateRecord, draft_threshold: float) -> ProspectResult:
        score = self.oracle.score_candidate(candidate)

        message: str | None = None
        if score.composite >= draft_threshold:
            message = self.oracle.draft_outreach(candidate, score)

        prospect_id = self.store.create(candidate, score)
        if message is not None:
            self.store.set_outreach_message(prospect_id, message)

        return ProspectResult(
            id=prospect_id,
            candidate=candidate,
            score=score,
            outreach_message=message,
            status=Status.ANALYZED,
        )

    def _process(self, candidate: CandidateRecord, draft_threshold: float) -> ProspectResult:
        issues = self.oracle.identify_issues(candidate.description, candidate.industry)
        return self._score_and_persist(candidate.with_issues(issues), draft_threshold)

    def run_discovery_batch(
        self,
        search_terms: Sequence[str],
        max_results: int = DEFAULT_MAX_RESULTS,
        draft_threshold: float = BATCH_DRAFT_THRESHOLD,
        report_threshold: float = REPORT_THRESHOLD,
        *,
        cancel: threading.Event | None = None,
    ) -> BatchResult:
        terms = _validate_terms(search_terms)
        if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results < 0:
            raise InvalidArgument(f"max_results must be a non-negative integer, got {max_results!r}")
        _check_threshold("draft_threshold", draft_threshold)
        _check_threshold("report_threshold", report_threshold)

        processed: list[ProspectResult] = []
        failures: list[CandidatePipelineFailure] = []
        cancelled = False
        try:
            candidates = self.source.search(terms)[:max_results]
            log.info("Processing %d candidate(s) for %d term(s)", len(candidates), len(terms))

            for candidate in candidates:
                if cancel is not None and cancel.is_set():
                    log.warning("Batch cancelled after %d candidate(s)", len(processed) + len(failures))
                    cancelled = True
                    break
                try:
                    processed.append(self._process(candidate, draft_threshold))
                except StorageError:
                    raise
                except Exception as exc:
                    log.error("Error processing prospect %s: %s", candidate.company, exc)
                    failures.append(CandidatePipelineFailure(candidate.company, exc))
        finally:
            self.source.close()

        qualified = [p for p in processed if p.score.composite >= report_threshold]
        log.info(
            "Batch complete — processed=%d, failed=%d, qualified=%d (>= %s)",
            len(processed), len(failures), len(qualified), report_threshold,
        )
        return BatchResult(
            processed_count=len(processed),
            qualified=qualified,
            failures=failures,
            cancelled=cancelled,
        )

    def analyze_one(
        self,
        candidate: CandidateRecord,
        draft_threshold: float = SINGLE_DRAFT_THRESHOLD,
        *,
        enrich: bool = False,
    ) -> ProspectResult:
        """Score, draft and persist a single supplied candidate; errors propagate."""
        missing = [f for f in ("company", "industry", "description") if not getattr(candidate, f, "")]
        if missing:
            raise InvalidArgument(f"Missing required fields: {', '.join(missing)}")
        _check_threshold("draft_threshold", draft_threshold)

        if enrich:
            return self._process(candidate, draft_threshold)
        return self._score_and_persist(candidate, draft_threshold)

    def regenerate_outreach(self, prospect_id: str) -> str:
        """Draft a fresh message for a stored prospect and save it."""
        get = getattr(self.store, "get", None)
        if get is None:
            raise InvalidArgument("This store cannot look prospects up by id")
        prospect = get(prospect_id)
        if prospect is None:
            raise InvalidArgument(f"Prospect {prospect_id!r} not found")
        if prospect.score is None:
            raise InvalidArgument(f"Prospect {prospect_id!r} has not been scored yet")

        message = self.oracle.draft_outreach(prospect.candidate, prospect.score)
        self.store.set_outreach_message(prospect_id, message)
        return message


def build_orchestrator(settings=None) -> PipelineOrchestrator:
    settings = settings or load_settings()
    if not settings.oracle_api_key:
        log.warning("No ORACLE_API_KEY — every judgment will use its fallback value")
    transport = OpenAITransport(
        api_key=settings.oracle_api_key,
        model=settings.oracle_model,
        base_url=settings.oracle_base_url,
    )
    return PipelineOrchestrator(
        source=get_sources(settings),
        oracle=JudgmentOracleClient(transport),
        store=ProspectStore(settings.store_path),
    )


def run(
    *,
    search_terms: Sequence[str] | None = None,
    max_results: int | None = None,
    draft_threshold: float | None = None,
    report_threshold: float | None = None,
    write_report: bool = True,
) -> dict[str, Any]:
    targeting = load_targeting()
    terms = search_terms if search_terms is not None else targeting["search_terms"]
    # Fail before any session or client is built
    _validate_terms(terms)

    ensure_dirs()
    with batch_log("discovery") as log_path:
        log.info("Discovery batch for terms: %s", ", ".join(terms))
        orchestrator = build_orchestrator()
        result = orchestrator.run_discovery_batch(
            terms,
            max_results=max_results if max_results is not None else targeting["max_results"],
            draft_threshold=draft_threshold if draft_threshold is not None else targeting["draft_threshold"],
            report_threshold=report_threshold if report_threshold is not None else targeting["report_threshold"],
        )

    report_path = None
    if write_report:
        from prospect_intel.report import build_batch_report, write_batch_report

        report_path = write_batch_report(build_batch_report(result, terms))

    summary = result.to_dict()
    summary["report_path"] = str(report_path) if report_path else None
    summary["log_path"] = str(log_path) if log_path else None
    return summary
