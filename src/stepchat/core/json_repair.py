"""Syntactic repair for near-JSON emitted by generative models."""

import re

# Either a complete double-quoted string literal, or a bare identifier key
# that follows `{` or `,`.
_TOKEN = re.compile(
    r'(?P<string>"(?:\\.|[^"\\])*")'
    r"|(?P<lead>[{,]\s*)(?P<key>[A-Za-z0-9_]+)(?P<colon>\s*:)"
)


def quote_bare_keys(text: str) -> str:
    """Quote unquoted object keys, e.g. `{type: "summarize"}` -> `{"type": "summarize"}`.

    String literals are copied verbatim, so text inside string values is never
    touched. No other repair is attempted.
    """

    def _replace(match: re.Match[str]) -> str:
        if match.group("string") is not None:
            return match.group("string")
        return f'{match.group("lead")}"{match.group("key")}"{match.group("colon")}'

    return _TOKEN.sub(_replace, text)
