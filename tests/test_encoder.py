from datetime import date, datetime
from decimal import Decimal
from enum import Enum

import pytest
from pydantic import BaseModel

from kvconf.mapping.encoder import decode_sequence, encode_options, encode_value, unescape_text
from kvconf.mapping.errors import SerializationError


class Shell(str, Enum):
    BASH = "bash"
    PWSH = "pwsh"


class Level(Enum):
    LOW = 1
    HIGH = 2


class Arg(BaseModel):
    flag: str
    value: int = 0


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("plain text", "plain text"),
        (True, "true"),
        (False, "false"),
        (42, "42"),
        (0.1, "0.1"),
        (None, "null"),
        (Shell.PWSH, "pwsh"),
        (Level.HIGH, "2"),
        (b"ab", "ab"),
        (datetime(2024, 1, 2, 3, 4, 5), "2024-01-02T03:04:05"),
        (date(2024, 1, 2), "2024-01-02"),
        (Decimal("1.10"), "1.10"),
    ],
)
def test_scalars_use_stable_text(value, expected: str) -> None:
    assert encode_value(value) == expected


def test_sequence_round_trip_preserves_order() -> None:
    text = encode_value(["b", "a", "c"])

    assert text == '["b","a","c"]'
    assert decode_sequence(text) == ["b", "a", "c"]


def test_composites_are_compact_json() -> None:
    assert encode_value(("x", 1)) == '["x",1]'
    assert encode_value({"k": "v"}) == '{"k":"v"}'
    assert encode_value(["é"]) == '["é"]'
    assert encode_value([Arg(flag="-n", value=3)]) == '[{"flag":"-n","value":3}]'


def test_unencodable_value_raises_with_key() -> None:
    with pytest.raises(SerializationError) as exc:
        encode_options({"title": "ok", "args": [object()]})

    assert exc.value.key == "args"


def test_encode_options_keeps_keys() -> None:
    encoded = encode_options({"active": True, "args": ["-c"], "title": "Bash"})

    assert encoded == {"active": "true", "args": '["-c"]', "title": "Bash"}


@pytest.mark.parametrize("text", ["[", '{"a": 1}', "nope"])
def test_decode_sequence_rejects_non_arrays(text: str) -> None:
    with pytest.raises(SerializationError):
        decode_sequence(text)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("null", "\\null"),
        ("\\null", "\\\\null"),
        ("nullable", "nullable"),
        ("\\path", "\\path"),
    ],
)
def test_null_like_strings_are_escaped(value: str, expected: str) -> None:
    assert encode_value(value) == expected
    assert unescape_text(expected) == value


def test_null_marker_is_distinct_from_any_string() -> None:
    assert encode_value(None) == "null"
    assert encode_value("null") != encode_value(None)


def test_non_utf8_bytes_raise_with_key() -> None:
    with pytest.raises(SerializationError) as exc:
        encode_value(b"\xff\xfe", "blob")

    assert exc.value.key == "blob"
