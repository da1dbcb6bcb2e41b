"""
Unit tests for exercise key parsing and display names.
"""

import pytest

from drillcore.core.keys import (
    AlgoKey,
    FlashcardKey,
    LessonKey,
    UnrecognizedKey,
    is_flashcard,
    module_of,
    parse_key,
    prettify_key,
    strip_variant_suffix,
)


class TestParseKey:
    def test_lesson_key(self):
        parsed = parse_key("m2_warmup_1")

        assert parsed == LessonKey(raw="m2_warmup_1", module=2, kind="warmup", index=1)

    def test_lesson_key_with_variant(self):
        parsed = parse_key("m1_challenge_4_v9")

        assert isinstance(parsed, LessonKey)
        assert (parsed.module, parsed.kind, parsed.index, parsed.variant) == (1, "challenge", 4, 9)

    def test_flashcard_key(self):
        assert parse_key("fc_m3_0") == FlashcardKey(raw="fc_m3_0", module=3, index=0)

    def test_algo_key(self):
        parsed = parse_key("algo_arrays_two-sum_v1")

        assert parsed == AlgoKey(
            raw="algo_arrays_two-sum_v1", category="arrays", problem="two-sum", variant="v1"
        )

    def test_lesson_key_with_hyphen_or_underscore_in_type(self):
        assert parse_key("m3_real-world_2") == LessonKey(
            raw="m3_real-world_2", module=3, kind="real-world", index=2
        )
        assert parse_key("m5_code_review_1_v2") == LessonKey(
            raw="m5_code_review_1_v2", module=5, kind="code_review", index=1, variant=2
        )

    @pytest.mark.parametrize("key", ["", "hello", "m_warmup_1", "fc_1", "mx_warmup_1"])
    def test_unrecognized(self, key):
        assert isinstance(parse_key(key), UnrecognizedKey)


class TestHelpers:
    def test_module_of(self):
        assert module_of("m12_drill_3") == 12
        assert module_of("fc_m4_2") == 4
        assert module_of("m3_real-world_2") == 3
        assert module_of("m7_notes") == 7
        assert module_of("algo_arrays_two-sum_v1") is None
        assert module_of("random") is None

    def test_is_flashcard(self):
        assert is_flashcard("fc_m1_0")
        assert not is_flashcard("m1_warmup_1")

    def test_strip_variant_suffix(self):
        assert strip_variant_suffix("m1_challenge_4_v9") == "m1_challenge_4"
        assert strip_variant_suffix("m1_challenge_4") == "m1_challenge_4"


class TestPrettifyKey:
    def test_label_wins(self):
        assert prettify_key("m2_warmup_1", label="FizzBuzz") == "FizzBuzz"

    def test_lesson(self):
        assert prettify_key("m2_warmup_1") == "Module 2 - Warmup 1"
        assert prettify_key("m1_challenge_4_v9") == "Module 1 - Challenge 4 (v9)"
        assert prettify_key("m3_real-world_2") == "Module 3 - Real-world 2"

    def test_flashcard_with_module_name(self):
        assert prettify_key("fc_m1_0", module_names={1: "Basics"}) == "M1 Flashcard 1 (Basics)"
        assert prettify_key("fc_m1_0") == "M1 Flashcard 1"

    def test_algo(self):
        assert prettify_key("algo_arrays_two-sum_v1") == "Two Sum [arrays/v1]"

    def test_unrecognized_unchanged(self):
        assert prettify_key("whatever") == "whatever"
