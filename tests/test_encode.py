"""Tests for TOON encoder."""

import sys
from pathlib import Path

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tooncodec import EncodeOptions, encode, encode_lines


class TestPrimitives:
    """Test encoding of primitive values."""

    def test_null(self):
        assert encode(None) == "null"

    def test_true(self):
        assert encode(True) == "true"

    def test_false(self):
        assert encode(False) == "false"

    def test_integer(self):
        assert encode(42) == "42"
        assert encode(-17) == "-17"
        assert encode(0) == "0"

    def test_float(self):
        assert encode(3.14) == "3.14"
        assert encode(-2.5) == "-2.5"
        assert encode(0.0) == "0"
        assert encode(-0.0) == "0"

    def test_whole_float(self):
        assert encode(5.0) == "5"

    def test_float_special_values(self):
        assert encode(float("nan")) == "null"
        assert encode(float("inf")) == "null"
        assert encode(float("-inf")) == "null"

    def test_no_scientific_notation(self):
        assert encode(1e-7) == "0.0000001"
        assert encode(1.5e20) == "150000000000000000000"
        assert encode(1e21) == "1000000000000000000000"

    def test_float_precision(self):
        assert encode(2.220446049250313e-16) == "0.0000000000000002220446049250313"
        assert encode(1.0000000000000002) == "1.0000000000000002"

    def test_big_integer(self):
        assert encode(12345678901234567890) == "12345678901234567890"

    def test_simple_string(self):
        assert encode("hello") == "hello"

    def test_string_with_spaces(self):
        assert encode("hello world") == "hello world"

    def test_unicode_string(self):
        assert encode("héllo 世界") == "héllo 世界"

    def test_string_needs_quotes(self):
        # Contains colon
        assert encode("key: value") == '"key: value"'
        # Contains brackets
        assert encode("array[0]") == '"array[0]"'
        # Contains newline
        assert encode("line1\nline2") == '"line1\\nline2"'
        # Contains tab
        assert encode("col1\tcol2") == '"col1\\tcol2"'
        # Contains comma
        assert encode("a,b") == '"a,b"'

    def test_surrounding_whitespace_quoted(self):
        assert encode(" padded ") == '" padded "'

    def test_leading_hyphen_quoted(self):
        assert encode("- item") == '"- item"'
        assert encode("-") == '"-"'

    def test_reserved_literals(self):
        # These look like literals but should be quoted
        assert encode("true") == '"true"'
        assert encode("false") == '"false"'
        assert encode("null") == '"null"'

    def test_literal_case_variants_unquoted(self):
        assert encode("True") == "True"
        assert encode("NULL") == "NULL"

    def test_numeric_strings(self):
        # These look like numbers but should be quoted
        assert encode("123") == '"123"'
        assert encode("-45") == '"-45"'
        assert encode("3.14") == '"3.14"'
        assert encode("1e5") == '"1e5"'
        assert encode("007") == '"007"'
        assert encode("0x1F") == '"0x1F"'

    def test_empty_string(self):
        assert encode("") == '""'


class TestObjects:
    """Test encoding of objects."""

    def test_empty_object(self):
        result = encode({})
        assert result == ""

    def test_simple_object(self):
        result = encode({"id": 123, "name": "Ada", "active": True})
        assert result == "id: 123\nname: Ada\nactive: true"

    def test_nested_object(self):
        result = encode({"user": {"name": "Bob", "role": "admin"}})
        lines = result.split("\n")
        assert lines == ["user:", "  name: Bob", "  role: admin"]

    def test_empty_nested_object(self):
        result = encode({"data": {}})
        assert result == "data:"

    def test_quoted_key(self):
        result = encode({"key with spaces": "value"})
        assert '"key with spaces": value' in result

    def test_key_quoting_rules(self):
        assert encode({"user_id": 1}) == "user_id: 1"
        assert encode({"a.b": 1}) == "a.b: 1"
        assert encode({"1st": 1}) == '"1st": 1'
        assert encode({"my-key": 1}) == '"my-key": 1'
        assert encode({"": 1}) == '"": 1'

    def test_preserves_key_order(self):
        result = encode({"z": 1, "a": 2})
        assert result == "z: 1\na: 2"

    def test_non_string_keys(self):
        assert encode({1: "a"}) == '"1": a'

    def test_key_with_trailing_newline_quoted(self):
        assert encode({"o\n": 1}) == '"o\\n": 1'
        assert encode({"t": [{"f\n": 1}]}) == 't[1]{"f\\n"}:\n  1'


class TestArraysInline:
    """Test inline primitive array encoding."""

    def test_string_array(self):
        result = encode({"tags": ["a", "b", "c"]})
        assert result == "tags[3]: a,b,c"

    def test_number_array(self):
        result = encode({"nums": [1, 2, 3]})
        assert result == "nums[3]: 1,2,3"

    def test_mixed_primitives(self):
        result = encode({"mix": [1, "two", True, None]})
        assert result == "mix[4]: 1,two,true,null"

    def test_empty_array(self):
        result = encode({"items": []})
        assert result == "items[0]:"

    def test_values_needing_quotes(self):
        result = encode({"items": ["a,b", "", "true"]})
        assert result == 'items[3]: "a,b","","true"'


class TestArraysTabular:
    """Test tabular array encoding."""

    def test_simple_tabular(self):
        result = encode({"users": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]})
        lines = result.split("\n")
        assert lines[0] == "users[2]{id,name}:"
        assert lines[1] == "  1,Alice"
        assert lines[2] == "  2,Bob"

    def test_tabular_with_quoted_values(self):
        result = encode({"data": [{"key": "a,b"}, {"key": "c,d"}]})
        lines = result.split("\n")
        assert lines[0] == "data[2]{key}:"
        assert '"a,b"' in lines[1]
        assert '"c,d"' in lines[2]

    def test_key_order_follows_first_element(self):
        result = encode({"rows": [{"a": 1, "b": 2}, {"b": 3, "a": 4}]})
        assert result == "rows[2]{a,b}:\n  1,2\n  4,3"

    def test_quoted_field_names(self):
        result = encode({"rows": [{"first name": "Ada"}]})
        assert result == 'rows[1]{"first name"}:\n  Ada'

    def test_different_keys_fall_back_to_list(self):
        result = encode({"rows": [{"a": 1}, {"b": 2}]})
        assert result == "rows[2]:\n  - a: 1\n  - b: 2"

    def test_nested_value_falls_back_to_list(self):
        result = encode({"rows": [{"a": 1}, {"a": [1]}]})
        assert result.split("\n")[0] == "rows[2]:"

    def test_empty_objects_not_tabular(self):
        result = encode({"rows": [{}, {}]})
        assert result == "rows[2]:\n  -\n  -"


class TestArraysList:
    """Test list format array encoding."""

    def test_nested_objects(self):
        result = encode({"items": [{"a": {"b": 1}}, {"a": {"b": 2}}]})
        assert result == "items[2]:\n  - a:\n      b: 1\n  - a:\n      b: 2"

    def test_mixed_types(self):
        result = encode({"items": [1, {"x": 2}, "three"]})
        lines = result.split("\n")
        assert "items[3]:" in lines[0]
        assert "- 1" in lines[1]
        assert "- x: 2" in lines[2]
        assert "- three" in lines[3]

    def test_object_item_sibling_fields(self):
        result = encode({"items": [{"id": 1, "name": "Ada", "tags": ["x"]}, 2]})
        assert result == "items[2]:\n  - id: 1\n    name: Ada\n    tags[1]: x\n  - 2"

    def test_tabular_first_field_of_item(self):
        data = {
            "items": [
                {"users": [{"id": 1, "name": "Ada"}, {"id": 2, "name": "Bob"}], "status": "active"}
            ]
        }
        assert encode(data) == (
            "items[1]:\n"
            "  - users[2]{id,name}:\n"
            "      1,Ada\n"
            "      2,Bob\n"
            "    status: active"
        )

    def test_nested_object_in_sibling_field(self):
        result = encode({"items": [{"id": 1, "meta": {"a": 1}}, "x"]})
        assert result == "items[2]:\n  - id: 1\n    meta:\n      a: 1\n  - x"

    def test_array_of_arrays(self):
        result = encode({"pairs": [[1, 2], ["a", "b"]]})
        assert result == "pairs[2]:\n  - [2]: 1,2\n  - [2]: a,b"

    def test_array_of_arrays_with_empty(self):
        result = encode({"pairs": [[], [1]]})
        assert result == "pairs[2]:\n  - [0]:\n  - [1]: 1"

    def test_nested_complex_array_item(self):
        result = encode({"items": [[{"a": 1}, {"b": 2}], 3]})
        assert result == "items[2]:\n  - [2]:\n    - a: 1\n    - b: 2\n  - 3"


class TestRootArray:
    """Test root-level array encoding."""

    def test_root_inline(self):
        result = encode([1, 2, 3])
        assert result == "[3]: 1,2,3"

    def test_root_empty(self):
        assert encode([]) == "[0]:"

    def test_root_tabular(self):
        result = encode([{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}])
        assert result == "[2]{id,name}:\n  1,Alice\n  2,Bob"

    def test_root_list(self):
        result = encode([{"a": {"b": 1}}, {"a": {"b": 2}}])
        lines = result.split("\n")
        assert "[2]:" in lines[0]
        assert "- a:" in lines[1]


class TestEscapeSequences:
    """Test string escape sequence encoding (critical for multiline!)."""

    def test_newline_escape(self):
        result = encode({"content": "line1\nline2"})
        assert result == 'content: "line1\\nline2"'

    def test_tab_escape(self):
        result = encode({"content": "col1\tcol2"})
        assert result == 'content: "col1\\tcol2"'

    def test_carriage_return_escape(self):
        result = encode({"content": "line1\rline2"})
        assert result == 'content: "line1\\rline2"'

    def test_backslash_escape(self):
        result = encode({"path": "C:\\Users\\name"})
        assert result == 'path: "C:\\\\Users\\\\name"'

    def test_quote_escape(self):
        result = encode({"msg": 'He said "hello"'})
        assert result == 'msg: "He said \\"hello\\""'

    def test_multiline_content(self):
        """Multiline strings must be properly escaped."""
        content = """def hello():
    print("Hello, World!")
    return True"""
        result = encode({"code": content})
        assert result.count("\n") == 0
        assert "\\n" in result


class TestDelimiters:
    """Test delimiter options."""

    def test_tab_delimiter(self):
        result = encode({"items": [1, 2, 3]}, EncodeOptions(delimiter="\t"))
        assert result == "items[3\t]: 1\t2\t3"

    def test_pipe_delimiter(self):
        result = encode({"items": [1, 2, 3]}, EncodeOptions(delimiter="|"))
        assert result == "items[3|]: 1|2|3"

    def test_pipe_tabular(self):
        data = {"users": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]}
        result = encode(data, EncodeOptions(delimiter="|"))
        assert result == "users[2|]{id|name}:\n  1|Alice\n  2|Bob"

    def test_comma_unquoted_with_pipe(self):
        result = encode({"items": ["a,b", "c|d"]}, EncodeOptions(delimiter="|"))
        assert result == 'items[2|]: a,b|"c|d"'

    def test_empty_array_carries_tag(self):
        assert encode({"items": []}, EncodeOptions(delimiter="|")) == "items[0|]:"

    def test_list_header_has_no_tag(self):
        result = encode({"items": [{"a": {"b": 1}}]}, EncodeOptions(delimiter="|"))
        assert result.split("\n")[0] == "items[1]:"


class TestIndentation:
    """Test indentation options."""

    def test_default_indent(self):
        result = encode({"a": {"b": 1}})
        assert "  b: 1" in result

    def test_custom_indent(self):
        result = encode({"a": {"b": 1}}, EncodeOptions(indent=4))
        assert "    b: 1" in result

    def test_zero_indent(self):
        result = encode({"a": {"b": 1}}, EncodeOptions(indent=0))
        assert result == "a:\nb: 1"

    def test_no_trailing_whitespace(self):
        data = {"a": {"b": [1, 2]}, "c": [{"x": 1}], "d": [], "e": {}}
        for line in encode(data).split("\n"):
            assert line == line.rstrip()


class TestEncodeLines:
    """Test line-by-line encoding."""

    def test_lines_match_encode(self):
        data = {"users": [{"id": 1}, {"id": 2}], "meta": {"count": 2}}
        assert "\n".join(encode_lines(data)) == encode(data)

    def test_empty_object_yields_nothing(self):
        assert list(encode_lines({})) == []


class TestNormalization:
    """Test value normalization during encoding."""

    def test_tuple_to_list(self):
        result = encode({"items": (1, 2, 3)})
        assert "items[3]: 1,2,3" in result

    def test_set_to_list(self):
        # Sets are sorted by string representation
        result = encode({"items": {3, 1, 2}})
        assert result == "items[3]: 1,2,3"

    def test_datetime_to_isoformat(self):
        from datetime import datetime

        dt = datetime(2024, 1, 15, 10, 30, 0)
        result = encode({"timestamp": dt})
        assert result == 'timestamp: "2024-01-15T10:30:00"'

    def test_unsupported_object_becomes_null(self):
        class Opaque:
            __slots__ = ()

            def __str__(self):
                return "opaque"

        assert encode({"x": Opaque()}) == "x: null"
        assert encode([Opaque(), 1]) == "[2]: null,1"


@pytest.mark.parametrize(
    "value,expected",
    [
        ({"a": None}, "a: null"),
        ({"a": [None]}, "a[1]: null"),
        ({"a": {"b": {"c": {}}}}, "a:\n  b:\n    c:"),
    ],
)
def test_small_documents(value, expected):
    assert encode(value) == expected
