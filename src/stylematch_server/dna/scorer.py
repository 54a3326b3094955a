"""
DNA Similarity Scorer

Scores how closely a generated text matches a reference LinguisticDNA, on a
0-100 scale.

Deductions from 100
-------------------
- Cadence: 2 points per word of average-sentence-length difference, max 40
- Vocabulary: 15 for complexity mismatch, 15 for jargon-level mismatch
- Formatting: 10 for casing mismatch, 10 for punctuation mismatch
- Signature phrases: 10 if the reference has any and none appear
"""

from __future__ import annotations

import math

from .analyzer import analyze_text
from .models import LinguisticDNA

MAX_CADENCE_PENALTY = 40
CADENCE_POINTS_PER_WORD = 2
VOCABULARY_PENALTY = 15
FORMATTING_PENALTY = 10
SIGNATURE_PENALTY = 10


def score_similarity(reference: LinguisticDNA, generated_text: str) -> int:
    """
    Return an integer fidelity score in [0, 100].
    """
    generated = analyze_text(generated_text)
    score = 100.0

    cadence_diff = abs(
        reference.cadence.avg_sentence_length - generated.cadence.avg_sentence_length
    )
    score -= min(MAX_CADENCE_PENALTY, cadence_diff * CADENCE_POINTS_PER_WORD)

    if reference.vocabulary.complexity != generated.vocabulary.complexity:
        score -= VOCABULARY_PENALTY
    if reference.vocabulary.jargon_level != generated.vocabulary.jargon_level:
        score -= VOCABULARY_PENALTY

    if reference.formatting.casing != generated.formatting.casing:
        score -= FORMATTING_PENALTY
    if reference.formatting.punctuation != generated.formatting.punctuation:
        score -= FORMATTING_PENALTY

    if reference.signature_phrases:
        lowered = generated_text.lower()
        if not any(phrase.lower() in lowered for phrase in reference.signature_phrases):
            score -= SIGNATURE_PENALTY

    return int(max(0, min(100, math.floor(score + 0.5))))
