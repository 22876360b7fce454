"""Prompt builders for the scoring and rewrite oracles."""

from __future__ import annotations

import json
from collections.abc import Sequence

from miro_write.application.ports.oracle_port import ChatMessage
from miro_write.domain.models import DocumentScore, SentenceVerdict, TextUnit, Tone

SYNTHESIS_MAX_VERDICTS = 200
SYNTHESIS_PREVIEW_CHARS = 120

DETECTION_CRITERIA = """CRITICAL DETECTION CRITERIA:

AI-WRITTEN INDICATORS (score higher aiWritten):
- Repetitive sentence structures and formulaic patterns
- Overuse of transition words: "Furthermore", "Moreover", "Additionally", "In conclusion"
- Perfectly balanced arguments without clear personal stance
- Generic examples lacking specificity
- Consistent sentence length and rhythm
- Predictable vocabulary choices and perfect grammar with no natural errors

AI-REFINED INDICATORS (score higher aiRefined):
- Human ideas with unnaturally polished execution
- Mix of casual and formal language that feels inconsistent
- Personal anecdotes joined by AI-like transitions
- Evidence of editing that removed personality

HUMAN-WRITTEN INDICATORS (score higher humanWritten):
- Inconsistent sentence structures (mix of short, long, fragmented)
- Personal voice with unique phrasing and word choices
- Specific, vivid examples and anecdotes
- Minor grammatical imperfections, informal expressions or slang
- Emotional nuance and authentic opinion"""

_TONE_GUIDANCE = {
    Tone.CASUAL: (
        "Write in a relaxed, conversational voice: contractions, everyday words, "
        "the occasional aside or rhetorical question."
    ),
    Tone.PROFESSIONAL: (
        "Keep a professional register: clear, confident and polished, but with a "
        "distinct human voice rather than template phrasing. Avoid slang."
    ),
    Tone.PRESERVE: (
        "Preserve the original tone, register and vocabulary level of the text; "
        "change rhythm and phrasing, not the voice."
    ),
}


def build_batch_messages(units: Sequence[TextUnit]) -> list[ChatMessage]:
    listing = "\n".join(f"{i}. {json.dumps(u.text, ensure_ascii=False)}" for i, u in enumerate(units, 1))
    prompt = f"""You are an AI content detector. Classify each numbered sentence below.

For every sentence return one object with:
- "classification": one of "Human", "Likely-AI", "AI"
- "confidence": a number between 0 and 1
- "reasoning": a short explanation (max 15 words)

Return ONLY a JSON array with exactly {len(units)} objects, in the same order as the sentences.

{DETECTION_CRITERIA}

Sentences:
{listing}"""
    return [ChatMessage(role="user", content=prompt)]


def build_synthesis_messages(verdicts: Sequence[SentenceVerdict]) -> list[ChatMessage]:
    shown = verdicts[:SYNTHESIS_MAX_VERDICTS]
    lines = "\n".join(
        f"{i}. [{v.classification.value}] ({v.confidence:.2f}) {v.text[:SYNTHESIS_PREVIEW_CHARS]}"
        for i, v in enumerate(shown, 1)
    )
    omitted = len(verdicts) - len(shown)
    note = f"\n({omitted} further sentences omitted)" if omitted > 0 else ""
    prompt = f"""You are summarizing a sentence-level AI detection analysis of one document.

Per-sentence verdicts ({len(verdicts)} sentences):
{lines}{note}

Return ONLY a JSON object:
{{
  "aiWritten": <0-100>,
  "aiRefined": <0-100>,
  "humanWritten": <0-100>,
  "summary": "<one sentence describing the overall authorship>"
}}
The three scores MUST sum to exactly 100."""
    return [ChatMessage(role="user", content=prompt)]


def build_detection_messages(text: str) -> list[ChatMessage]:
    prompt = f"""You are an elite AI content detector. Analyze this text with extreme precision.

Return ONLY a JSON object with these three scores that MUST sum to exactly 100:
{{
  "aiWritten": <0-100>,
  "aiRefined": <0-100>,
  "humanWritten": <0-100>
}}

{DETECTION_CRITERIA}

Text to analyze:
{text}"""
    return [ChatMessage(role="user", content=prompt)]


def build_rescoring_messages(text: str) -> list[ChatMessage]:
    prompt = f"""Analyze this text and return ONLY JSON with AI detection scores that sum to 100:
{{"aiWritten": <0-100>, "aiRefined": <0-100>, "humanWritten": <0-100>}}

Text to analyze:
{text}"""
    return [ChatMessage(role="user", content=prompt)]


def build_rewrite_messages(
    text: str,
    tone: Tone,
    current_score: DocumentScore | None,
    iteration: int,
    max_iterations: int,
    target_score: int,
) -> list[ChatMessage]:
    score_line = current_score.describe() if current_score is not None else "unknown"
    system = f"""You are a master at transforming AI-generated text into authentic, natural human writing.

CRITICAL: The text MUST pass AI detection as human-written (>={target_score}% human confidence).

Your transformation strategy:
1. Break robotic patterns - vary sentence length dramatically
2. Use natural transitions - avoid "Furthermore", "Moreover", "Additionally"
3. Authentic vocabulary - prefer specific, unexpected but appropriate words
4. Remove AI tells - no overly balanced viewpoints, no formulaic structure
5. Keep every fact, claim and name from the original; do not add new information

Tone: {_TONE_GUIDANCE[tone]}

Current score: {score_line}
Iteration: {iteration}/{max_iterations}
Target: >={target_score}% human detection

Reply with the rewritten text only, no preamble or commentary."""
    return [ChatMessage(role="system", content=system), ChatMessage(role="user", content=text)]
