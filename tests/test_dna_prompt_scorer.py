import pytest

from stylematch_server.dna.analyzer import DEFAULT_DNA, analyze_text
from stylematch_server.dna.prompt import compile_dna_prompt
from stylematch_server.dna.scorer import score_similarity

SAMPLE_TEXT = (
    "We shipped the new billing flow this week. At the end of the day, the team "
    "kept the scope small and the reviews quick. At the end of the day, that is "
    "what made the release calm. Next week we will tidy the dashboards and write "
    "the migration notes for support."
)


def _other(value, options):
    return next(o for o in options if o != value)


# ---------------------------------------------------------------------
# Prompt compiler
# ---------------------------------------------------------------------

class TestCompilePrompt:

    def test_contains_all_sections_in_order(self):
        prompt = compile_dna_prompt(analyze_text(SAMPLE_TEXT), "a product update email")

        positions = [
            prompt.index(marker)
            for marker in (
                "SYNTAX:",
                "VOCABULARY:",
                "FORMATTING:",
                "TONE:",
                "SIGNATURE PHRASES (use occasionally):",
                "Write for: a product update email",
            )
        ]
        assert positions == sorted(positions)
        assert prompt.endswith("Return ONLY the rewritten text.")

    def test_renders_metrics(self):
        prompt = compile_dna_prompt(DEFAULT_DNA, "a tweet")

        assert "- Average sentence length: 15 words" in prompt
        assert "- Sentence length range: 5-25 words" in prompt
        assert "- Sentence variation: medium (moderate variation)" in prompt
        assert "- Unique word ratio: 0.4" in prompt
        assert "TONE: neutral" in prompt

    @pytest.mark.parametrize(
        "variance, guidance",
        [("high", "mix short and long sentences"), ("low", "keep sentences similar length")],
    )
    def test_variance_guidance(self, variance, guidance):
        dna = DEFAULT_DNA.model_copy(
            update={"cadence": DEFAULT_DNA.cadence.model_copy(update={"variance": variance})}
        )
        assert f"({guidance})" in compile_dna_prompt(dna, "x")

    def test_optional_lines_omitted(self):
        prompt = compile_dna_prompt(DEFAULT_DNA, "a tweet")

        assert "Oxford comma" not in prompt
        assert "Double spacing" not in prompt
        assert "Favorite words" not in prompt
        assert "EXAMPLES FROM WRITER" not in prompt
        assert "None detected" in prompt
        assert "\n\n\n" not in prompt

    def test_optional_lines_present(self):
        dna = DEFAULT_DNA.model_copy(
            update={
                "formatting": DEFAULT_DNA.formatting.model_copy(
                    update={"uses_oxford_comma": True, "double_spacing": True}
                ),
                "signature_phrases": ["at the end", "to be fair"],
                "top_words": ["ship", "calm"],
                "sample_sentences": ["We ship small things often"],
            }
        )
        prompt = compile_dna_prompt(dna, "a blog post")

        assert "- Oxford comma: yes" in prompt
        assert "- Double spacing: yes" in prompt
        assert "- Favorite words: ship, calm" in prompt
        assert "at the end, to be fair" in prompt
        assert 'EXAMPLES FROM WRITER:\n- "We ship small things often"' in prompt
        assert "\n\n\n" not in prompt


# ---------------------------------------------------------------------
# Similarity scorer
# ---------------------------------------------------------------------

class TestScoreSimilarity:

    def test_identical_text_scores_100(self):
        reference = analyze_text(SAMPLE_TEXT)
        assert reference.signature_phrases
        assert score_similarity(reference, SAMPLE_TEXT) == 100

    def test_missing_signature_phrase_costs_10(self):
        reference = analyze_text(SAMPLE_TEXT)
        without = reference.model_copy(update={"signature_phrases": []})
        foreign = reference.model_copy(update={"signature_phrases": ["zebra crossing"]})

        assert score_similarity(without, SAMPLE_TEXT) - score_similarity(foreign, SAMPLE_TEXT) == 10

    def test_signature_match_is_case_insensitive(self):
        reference = analyze_text(SAMPLE_TEXT).model_copy(
            update={"signature_phrases": ["BILLING FLOW"]}
        )
        assert score_similarity(reference, SAMPLE_TEXT) == 100

    def test_cadence_penalty_is_capped(self):
        reference = analyze_text(SAMPLE_TEXT)
        far = reference.model_copy(
            update={
                "cadence": reference.cadence.model_copy(
                    update={"avg_sentence_length": reference.cadence.avg_sentence_length + 50}
                )
            }
        )
        assert score_similarity(far, SAMPLE_TEXT) == 60

    def test_cadence_penalty_is_two_per_word(self):
        reference = analyze_text(SAMPLE_TEXT)
        near = reference.model_copy(
            update={
                "cadence": reference.cadence.model_copy(
                    update={"avg_sentence_length": reference.cadence.avg_sentence_length + 5}
                )
            }
        )
        assert score_similarity(near, SAMPLE_TEXT) == 90

    def _mismatched(self, reference):
        return reference.model_copy(
            update={
                "vocabulary": reference.vocabulary.model_copy(
                    update={
                        "complexity": _other(
                            reference.vocabulary.complexity, ("simple", "complex")
                        ),
                        "jargon_level": _other(
                            reference.vocabulary.jargon_level, ("none", "high")
                        ),
                    }
                ),
                "formatting": reference.formatting.model_copy(
                    update={
                        "casing": _other(reference.formatting.casing, ("lowercase", "uppercase")),
                        "punctuation": _other(
                            reference.formatting.punctuation, ("minimal", "heavy")
                        ),
                    }
                ),
            }
        )

    def test_category_mismatches(self):
        reference = analyze_text(SAMPLE_TEXT)
        assert score_similarity(self._mismatched(reference), SAMPLE_TEXT) == 50

    def test_score_floors_at_zero(self):
        reference = self._mismatched(analyze_text(SAMPLE_TEXT))
        worst = reference.model_copy(
            update={
                "cadence": reference.cadence.model_copy(update={"avg_sentence_length": 200}),
                "signature_phrases": ["zebra crossing"],
            }
        )
        assert score_similarity(worst, SAMPLE_TEXT) == 0

    def test_short_generated_text_compares_against_default(self):
        assert score_similarity(DEFAULT_DNA, "tiny") == 100
