"""Command-line entry: discover, analyze, outreach, status, list."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from prospect_intel.config import load_settings
from prospect_intel.errors import InvalidArgument, StorageError
from prospect_intel.log import get_logger
from prospect_intel.models import CandidateRecord, PersistedProspect, Status

log = get_logger(__name__)


def _prospect_dict(p: PersistedProspect) -> dict[str, Any]:
    return {
        "id": p.id,
        "company": p.candidate.company,
        "industry": p.candidate.industry,
        "status": p.status.value,
        "score": p.score.to_dict() if p.score else None,
        "outreachMessage": p.outreach_message,
        "createdAt": p.created_at.isoformat() if p.created_at else None,
        "lastContactedAt": p.last_contacted_at.isoformat() if p.last_contacted_at else None,
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prospect-intel", description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    d = sub.add_parser("discover", help="run a discovery batch")
    d.add_argument("--term", action="append", dest="terms", help="search term (repeatable)")
    d.add_argument("--max-results", type=int)
    d.add_argument("--draft-threshold", type=int)
    d.add_argument("--report-threshold", type=int)
    d.add_argument("--no-report", action="store_true")

    a = sub.add_parser("analyze", help="score one candidate from a JSON file")
    a.add_argument("file", type=Path)
    a.add_argument("--draft-threshold", type=int, default=60)
    a.add_argument("--enrich", action="store_true", help="identify likely issues first")

    o = sub.add_parser("outreach", help="regenerate the outreach message of a stored prospect")
    o.add_argument("id")

    s = sub.add_parser("status", help="set the status of a stored prospect")
    s.add_argument("id")
    s.add_argument("status", help=", ".join(st.value for st in Status))

    ls = sub.add_parser("list", help="list stored prospects")
    ls.add_argument("--min-score", type=int, default=60)
    ls.add_argument("--status")
    ls.add_argument("--limit", type=int, default=50)
    return parser


def _dispatch(args: argparse.Namespace) -> Any:
    from prospect_intel.pipeline import build_orchestrator, run
    from prospect_intel.store import ProspectStore

    if args.command == "discover":
        return run(
            search_terms=args.terms,
            max_results=args.max_results,
            draft_threshold=args.draft_threshold,
            report_threshold=args.report_threshold,
            write_report=not args.no_report,
        )

    if args.command == "analyze":
        try:
            data = json.loads(args.file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise InvalidArgument(f"Cannot read candidate file {args.file}: {exc}") from exc
        if not isinstance(data, dict):
            raise InvalidArgument("Candidate file must hold a JSON object")
        orchestrator = build_orchestrator()
        result = orchestrator.analyze_one(
            CandidateRecord.from_dict(data), args.draft_threshold, enrich=args.enrich
        )
        return result.to_dict()

    if args.command == "outreach":
        message = build_orchestrator().regenerate_outreach(args.id)
        return {"prospectId": args.id, "outreachMessage": message}

    store = ProspectStore(load_settings().store_path)
    if args.command == "status":
        store.set_status(args.id, args.status)
        return {"success": True}

    if args.status:
        prospects = store.list_by_status(args.status, limit=args.limit)
    else:
        prospects = store.list_by_min_score(args.min_score)
    return {
        "prospects": [_prospect_dict(p) for p in prospects[: args.limit]],
        "total": len(prospects),
    }


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        output = _dispatch(args)
    except InvalidArgument as exc:
        log.error("Invalid input: %s", exc)
        return 2
    except StorageError as exc:
        log.error("Storage failure: %s", exc)
        return 1
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
