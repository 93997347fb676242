"""Prompt templates for the three judgment tasks."""
from __future__ import annotations

from prospect_intel.models import CandidateRecord, Score

SCORE_SYSTEM_PROMPT = (
    "You are an expert B2B sales analyst specializing in AI implementation "
    "opportunities. Respond only with valid JSON."
)

OUTREACH_SYSTEM_PROMPT = (
    "You are an expert B2B outreach specialist. Write messages that get "
    "responses by focusing on value and insight."
)

ISSUES_SYSTEM_PROMPT = (
    "You are a business process analyst. Identify automation opportunities. "
    "Respond only with valid JSON."
)


def build_score_prompt(candidate: CandidateRecord) -> str:
    context: list[str] = []
    if candidate.job_postings:
        context.append(f"Recent Job Postings: {', '.join(candidate.job_postings)}")
    if candidate.tech_stack:
        context.append(f"Tech Stack: {', '.join(candidate.tech_stack)}")
    if candidate.issues:
        context.append(f"Likely Pain Points: {', '.join(candidate.issues)}")

    return f"""Analyze this company for AI implementation readiness and score them as a potential client for AI automation services.

Company: {candidate.company}
Industry: {candidate.industry}
Size: {candidate.size}
Description: {candidate.description}
{chr(10).join(context)}

Score from 0-100 on these criteria:

1. URGENCY - How urgently do they need AI solutions?
   - Look for: "urgent", "ASAP", "immediately", "scaling challenges", "overwhelmed"
   - High urgency: 80-100, medium: 40-79, low: 0-39

2. BUDGET - What's their estimated budget capacity?
   - Company size, funding, industry revenue indicators
   - Enterprise: 80-100, growth stage: 40-79, startup/small: 0-39

3. FIT - How well do they match AI automation services?
   - Customer service, support, repetitive processes
   - Tech-forward industry, existing automation
   - High fit: 80-100, medium: 40-79, poor: 0-39

4. CONTACTABILITY - How easy is it to reach decision makers?
   - LinkedIn presence, contact info availability
   - Company size (smaller = easier to reach)
   - High: 80-100, medium: 40-79, low: 0-39

Respond with a single JSON object only:
{{
  "urgency": number,
  "budget": number,
  "fit": number,
  "contactability": number,
  "composite": number,
  "rationale": "Brief explanation of scoring rationale"
}}"""


def build_outreach_prompt(candidate: CandidateRecord, score: Score) -> str:
    issues = ", ".join(candidate.issues) if candidate.issues else "Unknown"
    return f"""Generate a personalized LinkedIn outreach message for this prospect:

Company: {candidate.company}
Industry: {candidate.industry}
Pain Points: {issues}
Urgency Score: {score.urgency}/100
Fit Score: {score.fit}/100

Message requirements:
- Maximum 150 words
- Professional but conversational tone
- Reference their specific industry/challenges
- Mention AI automation benefits relevant to them
- Include soft call-to-action for brief call
- Don't be salesy or pushy
- Demonstrate understanding of their business

Focus on value, not features. Lead with insight, not pitch.
Return only the message text."""


def build_issues_prompt(description: str, industry: str) -> str:
    return f"""Based on this company description and industry, identify likely AI automation pain points:

Industry: {industry}
Description: {description}

Common pain points to look for:
- Customer service overwhelm
- Manual data entry
- Repetitive tasks
- Scaling challenges
- Response time issues
- Lead qualification bottlenecks
- Documentation management
- Report generation
- Scheduling coordination

Return the 3-5 most likely pain points as JSON in this format:
{{"issues": ["Manual customer service responses", "Lead qualification bottlenecks", "Report generation overhead"]}}"""
