import math

import pytest

from nvrch.jsonvalue import JsonElement, JsonType, parse, stringify


def test_parse_object_members():
    doc = parse('{"a": 1, "b": [true, false, null], "c": "x"}')
    assert doc.type is JsonType.OBJECT
    assert list(doc.value) == ["a", "b", "c"]
    assert doc.get_key("a").type is JsonType.NUMBER
    assert doc.get_key("a").value == 1.0
    items = doc.get_key("b")
    assert items.get_index(0).value is True
    assert items.get_index(1).value is False
    assert items.get_index(2).type is JsonType.NULL
    assert doc.get_key("c").value == "x"
    assert doc.get_key("missing") is None


def test_stringify_escapes_solidus():
    assert JsonElement.string("a/b").stringify() == '"a\\/b"'


def test_stringify_control_character_as_unicode_escape():
    assert JsonElement.string("\x04").stringify() == '"\\u0004"'


def test_stringify_number_uses_six_decimals():
    assert JsonElement.number(2).stringify() == "2.000000"


@pytest.mark.parametrize(
    "element, text",
    [
        (JsonElement.null(), "null"),
        (JsonElement.boolean(True), "true"),
        (JsonElement.boolean(False), "false"),
    ],
)
def test_stringify_literals(element, text):
    assert element.stringify() == text
    assert parse(text) == element


def test_stringify_none_is_empty():
    assert stringify(None) == ""


def test_object_keeps_insertion_order_on_replace():
    doc = JsonElement.object("first", JsonElement.number(1))
    doc.set_key("second", JsonElement.number(2))
    doc.set_key("first", JsonElement.number(3))
    assert list(doc.value) == ["first", "second"]
    assert doc.get_key("first").value == 3.0


def test_set_key_none_removes_member():
    doc = JsonElement.object("k", JsonElement.null())
    doc.set_key("k", None)
    assert doc.get_key("k") is None
    assert doc.value == {}


def test_object_without_value_is_empty():
    assert JsonElement.object().value == {}
    assert JsonElement.object("k", None).value == {}


def test_set_key_on_non_object_raises():
    with pytest.raises(TypeError):
        JsonElement.array().set_key("k", JsonElement.null())


def test_get_key_on_non_object_raises():
    with pytest.raises(TypeError):
        JsonElement.string("s").get_key("k")


def test_append_and_pop():
    arr = JsonElement.array(JsonElement.number(1))
    arr.append(JsonElement.string("two"))
    arr.append(None)
    assert len(arr.value) == 2
    assert arr.pop() == JsonElement.string("two")
    assert arr.pop() == JsonElement.number(1)
    assert arr.pop() is None


def test_append_on_non_array_raises():
    with pytest.raises(TypeError):
        JsonElement.null().append(JsonElement.null())


def test_get_index_out_of_range():
    with pytest.raises(IndexError):
        JsonElement.array().get_index(0)


def test_array_grows_past_initial_capacity():
    arr = JsonElement.array()
    for n in range(25):
        arr.append(JsonElement.number(n))
    assert [item.value for item in arr.value] == [float(n) for n in range(25)]


def test_number_is_single_precision_and_stable():
    first = JsonElement.number(0.1)
    assert JsonElement.number(first.value) == first
    assert abs(first.value - 0.1) < 1e-7


def test_huge_number_overflows_to_infinity():
    assert parse("1e60").value == math.inf
    assert parse("-1e60").value == -math.inf


@pytest.mark.parametrize("text", ["[1, 2", '{"a": 1', "xyz", "-", ""])
def test_malformed_input_gives_null(text):
    assert parse(text).type is JsonType.NULL


def test_duplicate_keys_keep_last_value():
    doc = parse('{"a": 1, "a": 2}')
    assert list(doc.value) == ["a"]
    assert doc.get_key("a").value == 2.0


def test_unterminated_string_takes_rest_of_input():
    assert parse('"abc').value == "abc"


def test_unknown_escape_keeps_character():
    assert parse('"\\q"').value == "q"


def test_trailing_text_is_ignored():
    assert parse("[true] garbage") == JsonElement.array(JsonElement.boolean(True))


def test_negative_and_fractional_numbers_round_trip():
    for value in (-3.5, 0.25, 1024.0):
        assert parse(JsonElement.number(value).stringify()).value == value