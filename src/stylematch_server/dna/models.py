"""
Linguistic DNA Models

Immutable value objects describing the measurable style of a text sample.
Instances are computed fresh by the analyzer and never mutated in place.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

VarianceLevel = Literal["low", "medium", "high"]
Complexity = Literal["simple", "moderate", "complex"]
JargonLevel = Literal["none", "low", "medium", "high"]
Casing = Literal["lowercase", "uppercase", "mixed", "sentence"]
PunctuationDensity = Literal["minimal", "standard", "heavy"]
EmojiFrequency = Literal["none", "low", "medium", "high"]
Tone = Literal["energetic", "professional", "casual", "conversational", "neutral"]


class CadenceMetrics(BaseModel):
    """Sentence-length rhythm, measured in words per sentence."""

    avg_sentence_length: float = Field(..., ge=0)
    variance: VarianceLevel
    min_length: int = Field(..., ge=0)
    max_length: int = Field(..., ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)


class VocabularyMetrics(BaseModel):
    complexity: Complexity
    jargon_level: JargonLevel
    unique_word_ratio: float = Field(..., ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)


class FormattingFingerprint(BaseModel):
    """
    Surface formatting habits.

    `uses_oxford_comma` is True when the pattern was seen and None otherwise;
    absence of the pattern is not evidence against the habit.
    """

    casing: Casing
    punctuation: PunctuationDensity
    emoji_frequency: EmojiFrequency
    uses_oxford_comma: Optional[bool] = None
    double_spacing: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)


class LinguisticDNA(BaseModel):
    """
    Quantitative style profile of a text sample.
    """

    tone: Tone
    cadence: CadenceMetrics
    vocabulary: VocabularyMetrics
    formatting: FormattingFingerprint
    signature_phrases: List[str] = Field(default_factory=list, max_length=5)
    top_words: List[str] = Field(default_factory=list, max_length=10)
    sample_sentences: List[str] = Field(default_factory=list, max_length=3)

    model_config = ConfigDict(extra="forbid", frozen=True)
