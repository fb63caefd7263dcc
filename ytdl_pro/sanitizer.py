from __future__ import annotations

import re

# Characters a shell would treat as syntax: pipes, lists, subshells,
# substitution, quoting and redirection, plus line breaks.
FORBIDDEN_CHARS = "|&;()$`\"'<>\n\r"
_FORBIDDEN = re.compile("[" + re.escape(FORBIDDEN_CHARS) + "]")


class SanitizedToken(str):
    """A string already stripped of shell metacharacters."""


def sanitize(raw: str) -> SanitizedToken:
    return SanitizedToken(_FORBIDDEN.sub("", raw))


def quote_for_shell(raw: str) -> str:
    return '"' + sanitize(raw) + '"'


__all__ = ["FORBIDDEN_CHARS", "SanitizedToken", "sanitize", "quote_for_shell"]
