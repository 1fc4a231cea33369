"""
Tests for input sanitization
"""
import pytest

from followuply.validation.sanitize import (
    check_content, sanitize_email, sanitize_phone, sanitize_tags, sanitize_text
)


class TestSanitizeText:
    def test_strips_markup_characters(self):
        assert sanitize_text("<b>Hello</b>") == "bHello/b"

    def test_removes_script_schemes_case_insensitively(self):
        assert sanitize_text("JavaScript:alert(1)") == "alert(1)"
        assert sanitize_text("vbscript:run") == "run"
        assert sanitize_text("data:text/html,hi") == ",hi"

    def test_removal_does_not_leave_a_spliced_scheme(self):
        assert sanitize_text("javajavascript:script:alert(1)") == "alert(1)"

    def test_trims_and_truncates(self):
        assert sanitize_text("   padded   ") == "padded"
        assert sanitize_text("a" * 20, max_length=5) == "aaaaa"

    def test_none_becomes_empty_string(self):
        assert sanitize_text(None) == ""

    @pytest.mark.parametrize("raw", [
        "  <script>javascript:alert('x')</script>  ",
        "javajavascript:script:",
        "Plain text with trailing spaces    ",
        "x" * 999 + "  y",
        "data:text/htmldata:text/html<>",
    ])
    def test_is_a_fixed_point(self, raw):
        once = sanitize_text(raw)
        assert sanitize_text(once) == once


class TestSanitizeEmail:
    def test_lowercases_and_trims(self):
        assert sanitize_email("  JANE@X.COM ") == "jane@x.com"

    def test_drops_disallowed_characters(self):
        assert sanitize_email("ja ne<>@x.com") == "jane@x.com"

    def test_keeps_plus_addressing(self):
        assert sanitize_email("jane+work@x.com") == "jane+work@x.com"


class TestSanitizePhone:
    def test_keeps_only_digits(self):
        assert sanitize_phone("(555) 123-4567") == "5551234567"

    def test_keeps_leading_plus(self):
        assert sanitize_phone("+1 555 123 4567") == "+15551234567"

    def test_no_digits_is_empty(self):
        assert sanitize_phone("+ --") == ""


class TestSanitizeTags:
    def test_list_input_drops_empty_entries(self):
        assert sanitize_tags(["design", "", "  ", "<web>"]) == ["design", "web"]

    def test_comma_string_input(self):
        assert sanitize_tags("a, b,,c") == ["a", "b", "c"]

    def test_long_tags_are_truncated(self):
        assert sanitize_tags(["x" * 80]) == ["x" * 50]


class TestCheckContent:
    def test_clean_text_has_no_errors(self):
        text, errors = check_content("Follow up next week")
        assert text == "Follow up next week"
        assert errors == []

    def test_flags_event_handlers(self):
        _, errors = check_content('<img src=x onerror="steal()">')
        assert errors == ["Content contains potentially harmful code"]

    def test_flags_overlong_content(self):
        _, errors = check_content("a" * 10001)
        assert "Content too long (max 10,000 characters)" in errors
