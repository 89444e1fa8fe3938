from __future__ import annotations

import pytest

from ojjson.exceptions import ParseError
from ojjson.extraction import extract_json_block, parse_reply


@pytest.mark.parametrize(
    "text, expected",
    [
        ('chatter {"a":1} trailing', '{"a":1}'),
        ('```json\n{"a": {"b": 2}}\n```', '{"a": {"b": 2}}'),
        ("no braces", ""),
        ("} backwards {", ""),
        ("only { open", ""),
    ],
)
def test_extract_json_block(text, expected):
    assert extract_json_block(text) == expected


def test_parse_reply_tolerates_prose():
    assert parse_reply('Sure! Here you go: {"name": "Bob", "age": 30} Enjoy.') == {"name": "Bob", "age": 30}


def test_parse_reply_without_braces_raises_parse_error():
    with pytest.raises(ParseError) as info:
        parse_reply("I am afraid I cannot do that.")

    assert info.value.violations[0].code == "json_invalid"
    assert info.value.content == "I am afraid I cannot do that."


def test_parse_reply_does_not_repair_unbalanced_json():
    with pytest.raises(ParseError) as info:
        parse_reply('{"a": {"b": 1} and {"c": 2}')

    assert "Could not parse the output as JSON" in info.value.violations[0].message
