"""
Unit tests for services.code_generator module.
Tests code format, alphabet restrictions and input normalization.
"""
import re

from wordmate.services.code_generator import (
    CODE_ALPHABET,
    CODE_LENGTH,
    format_code,
    generate_redemption_code,
    normalize_code_input,
)

DISPLAY_RE = re.compile(r"^[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}$")


class TestGenerateRedemptionCode:
    """Tests for generated code shape."""

    def test_display_form_is_three_groups_of_four(self):
        for _ in range(50):
            assert DISPLAY_RE.match(generate_redemption_code())

    def test_uses_only_unambiguous_alphabet(self):
        for _ in range(200):
            raw = generate_redemption_code().replace("-", "")
            assert len(raw) == CODE_LENGTH
            assert set(raw) <= set(CODE_ALPHABET)
            assert not set(raw) & set("0O1I")

    def test_alphabet_has_32_symbols(self):
        assert len(CODE_ALPHABET) == 32
        assert len(set(CODE_ALPHABET)) == 32
        assert "L" in CODE_ALPHABET
        assert not set(CODE_ALPHABET) & set("0O1I")

    def test_codes_do_not_repeat(self):
        codes = {generate_redemption_code() for _ in range(500)}
        assert len(codes) == 500


class TestNormalizeCodeInput:
    """Tests for turning user input into the stored lookup key."""

    def test_lowercase_without_hyphens_is_regrouped(self):
        assert normalize_code_input("abcd1234efgh") == "ABCD-1234-EFGH"

    def test_already_hyphenated_input_is_uppercased(self):
        assert normalize_code_input("abcd-1234-efgh") == "ABCD-1234-EFGH"

    def test_spaces_are_stripped_when_no_hyphen_typed(self):
        assert normalize_code_input(" abcd 1234 efgh ") == "ABCD-1234-EFGH"

    def test_wrong_length_is_searched_as_typed(self):
        assert normalize_code_input("abc123") == "ABC123"

    def test_misplaced_hyphens_are_kept(self):
        # A hyphen was typed, so no regrouping happens
        assert normalize_code_input("abcdef-123456") == "ABCDEF-123456"

    def test_format_code_groups_by_four(self):
        assert format_code("abcdefghjkmn") == "ABCD-EFGH-JKMN"
