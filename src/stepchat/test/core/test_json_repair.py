import json

from stepchat.core.json_repair import quote_bare_keys


def test_quotes_bare_keys() -> None:
    assert quote_bare_keys('[{type: "summarize"}]') == '[{"type": "summarize"}]'
    assert quote_bare_keys('[{type:"translate", param: "French"}]') == '[{"type":"translate", "param": "French"}]'


def test_repaired_text_parses() -> None:
    repaired = quote_bare_keys('[\n  {type: "rewrite", param: "formal"},\n  {type: "extract"}\n]')
    assert json.loads(repaired) == [{"type": "rewrite", "param": "formal"}, {"type": "extract"}]


def test_valid_json_is_unchanged() -> None:
    text = '[{"type": "summarize"}, {"type": "translate", "param": "Dutch"}]'
    assert quote_bare_keys(text) == text


def test_string_values_are_never_touched() -> None:
    text = '[{"type": "rewrite", "param": "say {tone: warm}, then {mood: calm}"}]'
    assert quote_bare_keys(text) == text


def test_prose_is_left_alone() -> None:
    text = "Here is the JSON array: nothing"
    assert quote_bare_keys(text) == text
