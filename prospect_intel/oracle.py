"""Judgment oracle client: scoring, pain points and outreach drafts via an LLM.

Every public call is fail-soft. A malformed reply or an unreachable endpoint
yields a fallback value instead of an exception.
"""
from __future__ import annotations

import json
from typing import Any, Protocol

from prospect_intel import score_model
from prospect_intel.errors import OracleContractViolation, OracleUnavailable
from prospect_intel.log import get_logger
from prospect_intel.models import CandidateRecord, Score
from prospect_intel.prompts import (
    ISSUES_SYSTEM_PROMPT,
    OUTREACH_SYSTEM_PROMPT,
    SCORE_SYSTEM_PROMPT,
    build_issues_prompt,
    build_outreach_prompt,
    build_score_prompt,
)

log = get_logger(__name__)

FALLBACK_SCORE = Score(
    urgency=20,
    budget=20,
    fit=20,
    contactability=20,
    composite=20,
    rationale="analysis failed — manual review needed",
)
FALLBACK_MESSAGE = "Error generating personalized message"
GENERIC_ISSUES: tuple[str, ...] = (
    "Customer service automation",
    "Process optimization",
    "Data management",
)
MAX_ISSUES = 5
MESSAGE_WORD_TARGET = 150


class OracleTransport(Protocol):
    def complete(
        self,
        system: str,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
        json_mode: bool = False,
    ) -> str: ...


class OpenAITransport:
    """Chat-completions transport for any OpenAI-compatible endpoint."""

    def __init__(self, api_key: str, model: str = "gpt-4", base_url: str | None = None) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url or None
        self._client = None

    def _get_client(self):
        if not self.api_key:
            raise OracleUnavailable("No oracle API key configured (set ORACLE_API_KEY)")
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def complete(
        self,
        system: str,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
        json_mode: bool = False,
    ) -> str:
        client = self._get_client()
        kwargs: dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            r = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
        except Exception as exc:
            raise OracleUnavailable(f"Oracle request failed: {exc}") from exc
        return (r.choices[0].message.content or "").strip()


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        if lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        text = "\n".join(lines[1:])
    return text.strip()


def parse_json_reply(text: str) -> Any:
    """Decode a JSON reply, tolerating code fences and surrounding prose.

    Raises OracleContractViolation when nothing decodable is found.
    """
    cleaned = _strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass
    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i != -1]
    if not starts:
        raise OracleContractViolation(f"No JSON found in reply: {cleaned[:200]!r}")
    start = min(starts)
    end = cleaned.rfind("}" if cleaned[start] == "{" else "]")
    if end <= start:
        raise OracleContractViolation(f"No JSON found in reply: {cleaned[:200]!r}")
    try:
        return json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as exc:
        raise OracleContractViolation(f"Unparseable JSON reply: {exc}") from exc


class JudgmentOracleClient:
    """Builds judgment requests and turns the replies into typed results."""

    def __init__(self, transport: OracleTransport) -> None:
        self.transport = transport

    def score_candidate(self, candidate: CandidateRecord) -> Score:
        try:
            reply = self.transport.complete(
                SCORE_SYSTEM_PROMPT,
                build_score_prompt(candidate),
                temperature=0.3,
                max_tokens=500,
                json_mode=True,
            )
            score = score_model.validate(parse_json_reply(reply))
        except OracleContractViolation as exc:
            log.warning("Score reply for %s violated the schema (%s), using fallback", candidate.company, exc)
            return FALLBACK_SCORE
        except Exception as exc:
            log.warning("Scoring failed for %s (%s), using fallback", candidate.company, exc)
            return FALLBACK_SCORE
        log.info("Scored %s: composite=%d", candidate.company, score.composite)
        return score

    def draft_outreach(self, candidate: CandidateRecord, score: Score) -> str:
        try:
            reply = self.transport.complete(
                OUTREACH_SYSTEM_PROMPT,
                build_outreach_prompt(candidate, score),
                temperature=0.7,
                max_tokens=200,
            )
        except Exception as exc:
            log.warning("Outreach draft failed for %s (%s)", candidate.company, exc)
            return FALLBACK_MESSAGE

        message = (reply or "").strip().strip('"').strip()
        if not message:
            log.warning("Empty outreach draft for %s", candidate.company)
            return FALLBACK_MESSAGE
        words = len(message.split())
        if words > MESSAGE_WORD_TARGET:
            log.debug("Outreach draft for %s runs %d words", candidate.company, words)
        log.info("Outreach drafted for %s", candidate.company)
        return message

    def identify_issues(self, description: str, industry: str) -> list[str]:
        try:
            reply = self.transport.complete(
                ISSUES_SYSTEM_PROMPT,
                build_issues_prompt(description, industry),
                temperature=0.5,
                max_tokens=150,
                json_mode=True,
            )
        except Exception as exc:
            log.warning("Issue identification failed (%s)", exc)
            return []
        if not reply or not reply.strip():
            return []

        try:
            data = parse_json_reply(reply)
            if isinstance(data, dict):
                data = data.get("issues", data.get("painPoints"))
            if not isinstance(data, list):
                raise OracleContractViolation(f"Expected a list of issues, got {type(data).__name__}")
        except OracleContractViolation as exc:
            log.warning("Issue reply unusable (%s), using generic issues", exc)
            return list(GENERIC_ISSUES)

        issues = [item.strip() for item in data if isinstance(item, str) and item.strip()]
        return issues[:MAX_ISSUES]
