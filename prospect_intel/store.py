"""Prospect store: one CSV row per prospect, guarded by advisory file locks."""
from __future__ import annotations

import csv
import fcntl
import json
import uuid
from datetime import datetime, timezone
from pathlib import Path

from prospect_intel.errors import StorageError
from prospect_intel.log import get_logger
from prospect_intel.models import CandidateRecord, PersistedProspect, Score, Status

log = get_logger(__name__)

HEADERS: list[str] = [
    "id", "company", "website", "industry", "size", "description",
    "job_postings", "tech_stack", "issues", "source",
    "urgency", "budget", "fit", "contactability", "composite", "rationale",
    "outreach_message", "status", "created_at", "updated_at", "last_contacted_at",
]
_SCORE_FIELDS = ("urgency", "budget", "fit", "contactability", "composite")


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _parse_time(value: str) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _to_row(prospect_id: str, candidate: CandidateRecord, score: Score | None, now: str) -> dict[str, str]:
    row = {
        "id": prospect_id,
        "company": candidate.company,
        "website": candidate.website or "",
        "industry": candidate.industry,
        "size": candidate.size,
        "description": candidate.description,
        "job_postings": json.dumps(candidate.job_postings),
        "tech_stack": json.dumps(candidate.tech_stack),
        "issues": json.dumps(candidate.issues),
        "source": candidate.source,
        "rationale": score.rationale if score else "",
        "outreach_message": "",
        "status": (Status.ANALYZED if score else Status.DISCOVERED).value,
        "created_at": now,
        "updated_at": now,
        "last_contacted_at": "",
    }
    for name in _SCORE_FIELDS:
        row[name] = str(getattr(score, name)) if score else ""
    return row


def _from_row(row: dict[str, str]) -> PersistedProspect:
    candidate = CandidateRecord(
        company=row["company"],
        industry=row["industry"],
        size=row["size"],
        description=row["description"],
        job_postings=json.loads(row["job_postings"] or "[]"),
        tech_stack=json.loads(row["tech_stack"] or "[]"),
        website=row["website"] or None,
        issues=json.loads(row["issues"] or "[]"),
        source=row["source"] or "unknown",
    )
    score = None
    if row["composite"]:
        score = Score(rationale=row["rationale"], **{k: int(row[k]) for k in _SCORE_FIELDS})
    return PersistedProspect(
        id=row["id"],
        candidate=candidate,
        score=score,
        outreach_message=row["outreach_message"] or None,
        status=Status(row["status"]),
        created_at=_parse_time(row["created_at"]),
        updated_at=_parse_time(row["updated_at"]),
        last_contacted_at=_parse_time(row["last_contacted_at"]),
    )


class ProspectStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def ensure(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                with open(self.path, "w", newline="", encoding="utf-8") as f:
                    _lock(f)
                    csv.writer(f).writerow(HEADERS)
                    _unlock(f)
                log.info("Created prospect store → %s", self.path.name)
        except OSError as exc:
            raise StorageError(f"Cannot initialise store at {self.path}: {exc}") from exc

    def _read_rows(self) -> list[dict[str, str]]:
        self.ensure()
        try:
            with open(self.path, "r", newline="", encoding="utf-8") as f:
                _lock(f, exclusive=False)
                rows = list(csv.DictReader(f))
                _unlock(f)
        except (OSError, csv.Error) as exc:
            raise StorageError(f"Cannot read store {self.path}: {exc}") from exc
        return rows

    def _update(self, prospect_id: str, changes: dict[str, str]) -> None:
        """Read-modify-write under one exclusive lock."""
        self.ensure()
        try:
            with open(self.path, "r+", newline="", encoding="utf-8") as f:
                _lock(f)
                try:
                    rows = list(csv.DictReader(f))
                    for r in rows:
                        if r.get("id") == prospect_id:
                            r.update(changes)
                            break
                    else:
                        raise StorageError(f"Prospect {prospect_id!r} not found")
                    f.seek(0)
                    f.truncate()
                    w = csv.DictWriter(f, fieldnames=HEADERS)
                    w.writeheader()
                    w.writerows(rows)
                finally:
                    _unlock(f)
        except (OSError, csv.Error) as exc:
            raise StorageError(f"Cannot update store {self.path}: {exc}") from exc

    def create(self, candidate: CandidateRecord, score: Score | None = None) -> str:
        self.ensure()
        prospect_id = uuid.uuid4().hex[:12]
        row = _to_row(prospect_id, candidate, score, _now())
        try:
            with open(self.path, "a", newline="", encoding="utf-8") as f:
                _lock(f)
                csv.DictWriter(f, fieldnames=HEADERS).writerow(row)
                _unlock(f)
        except (OSError, csv.Error) as exc:
            raise StorageError(f"Cannot save prospect {candidate.company!r}: {exc}") from exc
        log.debug("Stored: %s [%s] → %s", candidate.company, row["status"], prospect_id)
        return prospect_id

    def set_outreach_message(self, prospect_id: str, text: str) -> None:
        self._update(prospect_id, {"outreach_message": text, "updated_at": _now()})
        log.debug("Saved outreach message for %s", prospect_id)

    def set_status(self, prospect_id: str, status: Status | str) -> None:
        status = Status.parse(status)
        now = _now()
        changes = {"status": status.value, "updated_at": now}
        if status is Status.CONTACTED:
            changes["last_contacted_at"] = now
        self._update(prospect_id, changes)
        log.debug("Updated %s → %s", prospect_id, status.value)

    def get(self, prospect_id: str) -> PersistedProspect | None:
        for r in self._read_rows():
            if r.get("id") == prospect_id:
                return _from_row(r)
        return None

    def list_recent(self, limit: int | None = 50) -> list[PersistedProspect]:
        """Newest first; insertion order breaks ties within the same second."""
        rows = list(enumerate(self._read_rows()))
        rows.sort(key=lambda pair: (pair[1]["created_at"], pair[0]), reverse=True)
        return [_from_row(r) for _, r in rows[:limit]]

    def list_by_min_score(self, min_score: int = 70, status: Status | str | None = None) -> list[PersistedProspect]:
        """Scored prospects at or above *min_score*, highest composite first."""
        wanted = Status.parse(status).value if status is not None else None
        prospects = [
            _from_row(r) for r in self._read_rows()
            if r["composite"] and int(r["composite"]) >= min_score
            and (wanted is None or r["status"] == wanted)
        ]
        prospects.sort(key=lambda p: -p.score.composite)
        return prospects

    def list_by_status(self, status: Status | str, limit: int = 50) -> list[PersistedProspect]:
        wanted = Status.parse(status)
        return [p for p in self.list_recent(limit=None) if p.status is wanted][:limit]
