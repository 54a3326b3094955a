"""
Linguistic DNA Analyzer

Extracts quantitative style metrics from raw prose:

- Cadence: sentence-length mean and spread
- Vocabulary: word-length complexity, jargon density, lexical variety
- Formatting: casing, punctuation density, emoji use, Oxford comma, spacing
- Signature phrases, top words and representative sample sentences
- A categorical tone derived from the above

The heuristics are deliberately simple regex/whitespace based measurements.
Thresholds are fixed constants because the prompt compiler and the similarity
scorer are calibrated against them.

`analyze_text` is a pure function of its input.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Dict, List

from .models import (
    CadenceMetrics,
    FormattingFingerprint,
    LinguisticDNA,
    VocabularyMetrics,
)

MIN_ANALYZABLE_CHARS = 50

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "is", "are", "was", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would",
    "could", "should", "may", "might", "must", "shall", "can", "need",
    "this", "that", "these", "those", "i", "you", "he", "she", "it", "we",
    "they", "what", "which", "who", "whom", "whose", "where", "when", "why",
    "how", "all", "each", "every", "both", "few", "more", "most", "other",
    "some", "such", "no", "nor", "not", "only", "own", "same", "so", "than",
    "too", "very", "just", "also", "now", "here", "there", "then", "once",
    "if", "as", "because", "until", "while", "about", "against", "between",
    "into", "through", "during", "before", "after", "above", "below", "up",
    "down", "out", "off", "over", "under", "again", "further",
})

# Emoji literals that mark an energetic voice on their own.
ENERGETIC_EMOJI = ("\U0001F525", "\U0001F440")  # fire, eyes

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_PUNCTUATION = re.compile(r"[.,!?;:]")
_EMOJI = re.compile("[\U0001F300-\U0001F9FF]")
_OXFORD_COMMA = re.compile(r", \w+ and \w+", re.ASCII)

DEFAULT_DNA = LinguisticDNA(
    tone="neutral",
    cadence=CadenceMetrics(avg_sentence_length=15, variance="medium", min_length=5, max_length=25),
    vocabulary=VocabularyMetrics(complexity="moderate", jargon_level="low", unique_word_ratio=0.4),
    formatting=FormattingFingerprint(
        casing="sentence",
        punctuation="standard",
        emoji_frequency="none",
        uses_oxford_comma=None,
        double_spacing=False,
    ),
)


def _round_half_up(value: float, digits: int) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _sentences(text: str) -> List[str]:
    return [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def _top_by_count(counts: Dict[str, int], limit: int, min_count: int = 1) -> List[str]:
    # dicts keep insertion order and sorted() is stable: ties keep discovery order
    ranked = sorted(
        (item for item in counts.items() if item[1] >= min_count),
        key=lambda item: item[1],
        reverse=True,
    )
    return [word for word, _ in ranked[:limit]]


# ---------------------------------------------------------------------
# Metric extractors
# ---------------------------------------------------------------------

def calculate_cadence(text: str) -> CadenceMetrics:
    sentences = _sentences(text)
    if not sentences:
        return CadenceMetrics(avg_sentence_length=0, variance="low", min_length=0, max_length=0)

    lengths = [len(s.split()) for s in sentences]
    avg = sum(lengths) / len(lengths)
    std_dev = math.sqrt(sum((n - avg) ** 2 for n in lengths) / len(lengths))

    if std_dev < 3:
        variance = "low"
    elif std_dev < 7:
        variance = "medium"
    else:
        variance = "high"

    return CadenceMetrics(
        avg_sentence_length=_round_half_up(avg, 1),
        variance=variance,
        min_length=min(lengths),
        max_length=max(lengths),
    )


def analyze_vocabulary(text: str) -> VocabularyMetrics:
    words = text.lower().split()
    if not words:
        return DEFAULT_DNA.vocabulary

    unique_words = {w for w in words if w not in STOP_WORDS}
    unique_ratio = len(unique_words) / len(words)

    avg_word_length = sum(len(w) for w in words) / len(words)
    if avg_word_length < 4:
        complexity = "simple"
    elif avg_word_length < 5.5:
        complexity = "moderate"
    else:
        complexity = "complex"

    # Long words are a cheap proxy for jargon
    jargon_ratio = sum(1 for w in words if len(w) > 8) / len(words)
    if jargon_ratio < 0.02:
        jargon_level = "none"
    elif jargon_ratio < 0.08:
        jargon_level = "low"
    elif jargon_ratio < 0.15:
        jargon_level = "medium"
    else:
        jargon_level = "high"

    return VocabularyMetrics(
        complexity=complexity,
        jargon_level=jargon_level,
        unique_word_ratio=_round_half_up(unique_ratio, 2),
    )


def analyze_formatting(text: str) -> FormattingFingerprint:
    uppercase_count = len(_UPPER.findall(text))
    uppercase_ratio = uppercase_count / len(text) if text else 0.0

    if uppercase_count == 0:
        casing = "lowercase"
    elif not _LOWER.search(text):
        casing = "uppercase"
    elif uppercase_ratio < 0.05:
        casing = "sentence"
    else:
        casing = "mixed"

    word_count = max(len(text.split()), 1)

    punct_ratio = len(_PUNCTUATION.findall(text)) / word_count
    if punct_ratio < 0.3:
        punctuation = "minimal"
    elif punct_ratio < 0.6:
        punctuation = "standard"
    else:
        punctuation = "heavy"

    emoji_count = len(_EMOJI.findall(text))
    emoji_ratio = emoji_count / word_count
    if emoji_count == 0:
        emoji_frequency = "none"
    elif emoji_ratio < 0.02:
        emoji_frequency = "low"
    elif emoji_ratio < 0.1:
        emoji_frequency = "medium"
    else:
        emoji_frequency = "high"

    return FormattingFingerprint(
        casing=casing,
        punctuation=punctuation,
        emoji_frequency=emoji_frequency,
        uses_oxford_comma=True if _OXFORD_COMMA.search(text) else None,
        double_spacing="  " in text,
    )


def extract_signature_phrases(text: str, limit: int = 5) -> List[str]:
    """
    Recurring 2-4 word phrases that do not start with a stop word.

    Only phrases seen at least twice are kept.
    """
    words = text.lower().split()
    counts: Dict[str, int] = {}

    for size in (2, 3, 4):
        for i in range(len(words) - size + 1):
            if words[i] in STOP_WORDS:
                continue
            phrase = " ".join(words[i : i + size])
            counts[phrase] = counts.get(phrase, 0) + 1

    return _top_by_count(counts, limit, min_count=2)


def extract_top_words(text: str, limit: int = 10) -> List[str]:
    counts = Counter(
        w for w in text.lower().split() if len(w) > 2 and w not in STOP_WORDS
    )
    return _top_by_count(dict(counts), limit)


def extract_sample_sentences(text: str) -> List[str]:
    """
    Up to three representative sentences: one short, one medium, one long.

    Each is taken from the middle of its length bucket.
    """
    sentences = [
        s for s in _sentences(text)
        if len(s) > 20 and len(s.split()) > 5
    ]

    if len(sentences) <= 3:
        return sentences

    short = [s for s in sentences if len(s.split()) < 10]
    medium = [s for s in sentences if 10 <= len(s.split()) < 20]
    long = [s for s in sentences if len(s.split()) >= 20]

    samples = [bucket[len(bucket) // 2] for bucket in (short, medium, long) if bucket]
    return samples[:3]


def derive_tone(
    text: str,
    cadence: CadenceMetrics,
    vocabulary: VocabularyMetrics,
    formatting: FormattingFingerprint,
    signature_phrases: List[str],
) -> str:
    """
    Priority chain; the first matching rule wins.
    """
    if formatting.emoji_frequency == "high" or any(e in text for e in ENERGETIC_EMOJI):
        return "energetic"
    if vocabulary.complexity == "complex" or formatting.casing == "sentence":
        return "professional"
    if cadence.avg_sentence_length < 10 and formatting.punctuation == "minimal":
        return "casual"
    if any("?" in phrase for phrase in signature_phrases):
        return "conversational"
    return "neutral"


# ---------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------

def analyze_text(text: str) -> LinguisticDNA:
    """
    Compute the Linguistic DNA of a text sample.

    Texts shorter than 50 characters (after trimming) do not carry enough
    signal and yield `DEFAULT_DNA`.

    Parameters
    ----------
    text : str
        Raw prose.

    Returns
    -------
    LinguisticDNA
    """
    if not text or len(text.strip()) < MIN_ANALYZABLE_CHARS:
        return DEFAULT_DNA

    cadence = calculate_cadence(text)
    vocabulary = analyze_vocabulary(text)
    formatting = analyze_formatting(text)
    signature_phrases = extract_signature_phrases(text)

    return LinguisticDNA(
        tone=derive_tone(text, cadence, vocabulary, formatting, signature_phrases),
        cadence=cadence,
        vocabulary=vocabulary,
        formatting=formatting,
        signature_phrases=signature_phrases,
        top_words=extract_top_words(text),
        sample_sentences=extract_sample_sentences(text),
    )
