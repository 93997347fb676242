"""Markdown report of a discovery batch."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from prospect_intel.config import REPORTS_DIR
from prospect_intel.log import get_logger
from prospect_intel.models import BatchResult

log = get_logger(__name__)


def _clip(text: str, width: int) -> str:
    return text[:width] + ("…" if len(text) > width else "")


def build_batch_report(result: BatchResult, search_terms: Sequence[str]) -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M")
    lines: list[str] = [f"# Prospect Discovery Report — {stamp} UTC", ""]
    lines.append(f"_Search terms: {', '.join(search_terms)}_")
    lines.append("")
    lines.append(
        f"**{result.processed_count}** processed | **{len(result.qualified)}** qualified"
        f" | **{len(result.failures)}** failed"
    )
    if result.cancelled:
        lines.append("")
        lines.append("_Batch was cancelled before every candidate was processed._")
    lines.append("")

    if result.qualified:
        lines.append("## Qualified Prospects")
        lines.append("")
        ranked = sorted(result.qualified, key=lambda p: -p.score.composite)
        for p in ranked:
            s = p.score
            lines.append(f"### {p.candidate.company} ({p.candidate.industry})")
            lines.append(
                f"- **Composite:** {s.composite} — urgency {s.urgency}, budget {s.budget},"
                f" fit {s.fit}, contactability {s.contactability}"
            )
            if s.rationale:
                lines.append(f"- **Why:** {_clip(s.rationale, 200)}")
            if p.candidate.issues:
                lines.append(f"- **Likely issues:** {', '.join(p.candidate.issues)}")
            if p.candidate.website:
                lines.append(f"- **Website:** {p.candidate.website}")
            lines.append(f"- **Id:** `{p.id}`")
            if p.outreach_message:
                lines.append("")
                lines.extend(f"> {row}" if row else ">" for row in p.outreach_message.splitlines())
            lines.append("")

        lines.append("---")
        lines.append("")
        lines.append("| # | Company | Industry | Composite | Message |")
        lines.append("|--:|---------|----------|----------:|---------|")
        for i, p in enumerate(ranked, 1):
            has_msg = "yes" if p.outreach_message else "—"
            lines.append(
                f"| {i} | {_clip(p.candidate.company, 28)} | {_clip(p.candidate.industry, 18)}"
                f" | {p.score.composite} | {has_msg} |"
            )
        lines.append("")

    if result.failures:
        lines.append("## Failed Candidates")
        lines.append("")
        for f in result.failures:
            lines.append(f"- **{f.company or '<unnamed>'}** — {_clip(str(f.cause), 120)}")
        lines.append("")

    log.info("Built batch report: %d qualified", len(result.qualified))
    return "\n".join(lines)


def write_batch_report(content: str, directory: Path | None = None) -> Path:
    directory = directory or REPORTS_DIR
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S")
    path = directory / f"discovery_{stamp}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Report written → %s", path)
    return path
