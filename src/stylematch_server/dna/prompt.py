"""
Renders a LinguisticDNA profile into plain-text style instructions for the
downstream generation service.
"""

from __future__ import annotations

from typing import List

from .models import LinguisticDNA

_VARIANCE_GUIDANCE = {
    "high": "mix short and long sentences",
    "low": "keep sentences similar length",
}


def compile_dna_prompt(dna: LinguisticDNA, user_intent: str) -> str:
    """
    Build the ghostwriting instruction block for `dna`.

    Optional lines (Oxford comma, double spacing, example sentences) are
    omitted entirely when there is nothing to say, rather than rendered blank.
    """
    guidance = _VARIANCE_GUIDANCE.get(dna.cadence.variance, "moderate variation")

    lines: List[str] = [
        "You are a ghostwriter. Match this writer's DNA exactly.",
        "",
        "SYNTAX:",
        f"- Average sentence length: {dna.cadence.avg_sentence_length:g} words",
        f"- Sentence length range: {dna.cadence.min_length}-{dna.cadence.max_length} words",
        f"- Sentence variation: {dna.cadence.variance} ({guidance})",
        "",
        "VOCABULARY:",
        f"- Complexity: {dna.vocabulary.complexity}",
        f"- Jargon level: {dna.vocabulary.jargon_level}",
        f"- Unique word ratio: {dna.vocabulary.unique_word_ratio:g}",
    ]
    if dna.top_words:
        lines.append(f"- Favorite words: {', '.join(dna.top_words)}")

    lines += [
        "",
        "FORMATTING:",
        f"- Header casing: {dna.formatting.casing}",
        f"- Punctuation: {dna.formatting.punctuation}",
        f"- Emoji usage: {dna.formatting.emoji_frequency}",
    ]
    if dna.formatting.uses_oxford_comma is not None:
        lines.append(f"- Oxford comma: {'yes' if dna.formatting.uses_oxford_comma else 'no'}")
    if dna.formatting.double_spacing:
        lines.append("- Double spacing: yes")

    lines += [
        "",
        f"TONE: {dna.tone}",
        "",
        "SIGNATURE PHRASES (use occasionally):",
        ", ".join(dna.signature_phrases) if dna.signature_phrases else "None detected",
    ]

    if dna.sample_sentences:
        lines += ["", "EXAMPLES FROM WRITER:"]
        lines += [f'- "{s}"' for s in dna.sample_sentences]

    lines += [
        "",
        f"Write for: {user_intent}",
        "",
        "Return ONLY the rewritten text.",
    ]

    return "\n".join(lines)
