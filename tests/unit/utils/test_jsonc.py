"""Tests for mcpinstall.utils.jsonc module."""

import json

import pytest

from mcpinstall.utils.jsonc import (
    JSONCError,
    Object,
    detect_newline,
    loads,
    normalize,
    parse_document,
    render_value,
    set_member,
)


def _set(text: str, key: str, value) -> str:
    root = parse_document(text).root
    assert isinstance(root, Object)
    return set_member(text, root, key, value)


class TestParse:
    """Tests for JSONC parsing."""

    def test_parses_plain_json(self):
        """Plain JSON parses to the same values as the json module."""
        text = '{"a": 1, "b": [true, false, null], "c": {"d": "e"}, "f": -1.5e3}'
        assert loads(text) == json.loads(text)

    def test_line_comments(self):
        """Line comments are ignored."""
        text = '{\n  // comment\n  "a": 1 // trailing\n}'
        assert loads(text) == {"a": 1}

    def test_block_comments(self):
        """Block comments are ignored, including multi-line ones."""
        text = '/* header\n spanning lines */ {"a": /* inline */ 1}'
        assert loads(text) == {"a": 1}

    def test_comment_markers_inside_strings(self):
        """Comment markers inside strings are string content."""
        text = '{"url": "http://example.com/*x*/"}'
        assert loads(text) == {"url": "http://example.com/*x*/"}

    def test_trailing_commas(self):
        """Trailing commas in objects and arrays are accepted."""
        text = '{"a": [1, 2,], "b": {"c": 3,},}'
        assert loads(text) == {"a": [1, 2], "b": {"c": 3}}

    def test_has_comments_flag(self):
        """The document records whether it contained comments."""
        assert parse_document('{"a": 1} // x').has_comments is True
        assert parse_document('{"a": 1}').has_comments is False

    def test_byte_order_mark(self):
        """A leading byte order mark is skipped."""
        assert loads("\ufeff{\"a\": 1}") == {"a": 1}

    def test_duplicate_keys_last_wins(self):
        """Duplicate keys resolve to the last occurrence."""
        assert loads('{"a": 1, "a": 2}') == {"a": 2}

    def test_escaped_strings(self):
        """String escapes are decoded."""
        assert loads('{"a": "line\\nbreak \\u00e9"}') == {"a": "line\nbreak é"}

    def test_records_value_spans(self):
        """Every value records its source span."""
        text = '{"a": [1, 2]}'
        root = parse_document(text).root
        member = root.find("a")
        assert text[member.value.start : member.value.end] == "[1, 2]"

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "{",
            '{"a" 1}',
            '{"a": 1 "b": 2}',
            "{'a': 1}",
            '{"a": 1} extra',
            '{"a": tru}',
            "/* unterminated",
            '{"a": 01}',
        ],
    )
    def test_rejects_malformed_input(self, text: str):
        """Malformed input raises JSONCError."""
        with pytest.raises(JSONCError):
            parse_document(text)

    def test_error_position(self):
        """Errors report line and column."""
        with pytest.raises(JSONCError) as exc_info:
            parse_document('{\n  "a": 1\n  "b": 2\n}')

        assert exc_info.value.lineno == 3
        assert exc_info.value.colno == 3
        assert "line 3" in str(exc_info.value)

    def test_deep_nesting(self):
        """Nesting past the interpreter recursion limit is a parse error."""
        text = "[" * 5000 + "]" * 5000

        with pytest.raises(JSONCError, match="nested too deeply"):
            parse_document(text)

    def test_deep_unterminated_nesting(self):
        """Unterminated deep nesting is a parse error too."""
        with pytest.raises(JSONCError, match="nested too deeply"):
            parse_document('{"x": ' + "[" * 5000)

    def test_error_is_value_error(self):
        """JSONCError can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_document("{")


class TestRenderValue:
    """Tests for render_value function."""

    def test_single_line(self):
        """No indent renders on one line."""
        assert render_value({"a": [1, 2]}, None) == '{"a": [1, 2]}'

    def test_indented_continuation_lines(self):
        """Continuation lines are prefixed with the given indent."""
        rendered = render_value({"a": 1}, "    ", "  ")
        assert rendered == '{\n      "a": 1\n    }'

    def test_crlf_newlines(self):
        """The requested newline sequence is used."""
        rendered = render_value({"a": 1}, "", "  ", "\r\n")
        assert rendered == '{\r\n  "a": 1\r\n}'

    def test_non_ascii_kept(self):
        """Non-ASCII characters are written as-is."""
        assert render_value("café", None) == '"café"'


class TestSetMember:
    """Tests for set_member function."""

    def test_expands_empty_object(self):
        """An empty object is expanded onto multiple lines."""
        result = _set("{}", "a", 1)
        assert result == '{\n  "a": 1\n}'

    def test_replaces_existing_value(self):
        """An existing value is replaced in place."""
        text = '{\n  "a": 1,\n  "b": 2\n}'
        result = _set(text, "a", 5)
        assert result == '{\n  "a": 5,\n  "b": 2\n}'

    def test_appends_to_multiline_object(self):
        """A new member goes on its own line after the last member."""
        text = '{\n  "a": 1\n}'
        result = _set(text, "b", 2)
        assert result == '{\n  "a": 1,\n  "b": 2\n}'

    def test_matches_existing_indentation(self):
        """Inserted members use the object's indentation."""
        text = '{\n    "a": 1\n}'
        result = _set(text, "b", {"c": 2})
        assert result == '{\n    "a": 1,\n    "b": {\n        "c": 2\n    }\n}'

    def test_tab_indentation(self):
        """Tab-indented documents stay tab-indented."""
        text = '{\n\t"a": 1\n}'
        result = _set(text, "b", 2)
        assert result == '{\n\t"a": 1,\n\t"b": 2\n}'

    def test_single_line_object_stays_single_line(self):
        """Single-line objects get the new member inline."""
        result = _set('{"a": 1}', "b", [1, 2])
        assert result == '{"a": 1, "b": [1, 2]}'

    def test_keeps_trailing_comma(self):
        """A trailing comma after the last member is preserved."""
        text = '{\n  "a": 1,\n}'
        result = _set(text, "b", 2)
        assert result == '{\n  "a": 1,\n  "b": 2,\n}'
        assert loads(result) == {"a": 1, "b": 2}

    def test_keeps_trailing_line_comment(self):
        """A comment after the last member stays on its line."""
        text = '{\n  "a": 1 // first\n}'
        result = _set(text, "b", 2)
        assert result == '{\n  "a": 1, // first\n  "b": 2\n}'
        assert loads(result) == {"a": 1, "b": 2}

    def test_comment_only_object(self):
        """An object holding only a comment keeps the comment."""
        text = '{\n  // nothing yet\n}'
        result = _set(text, "a", 1)
        assert "// nothing yet" in result
        assert loads(result) == {"a": 1}

    def test_crlf_document(self):
        """CRLF documents get CRLF line endings in inserted text."""
        text = '{\r\n  "a": 1\r\n}'
        result = _set(text, "b", {"c": 2})
        assert "\n" not in result.replace("\r\n", "")
        assert loads(result) == {"a": 1, "b": {"c": 2}}

    def test_nested_object(self):
        """Members can be set on a nested object."""
        text = '{\n  "outer": {\n    "x": 1\n  }\n}'
        root = parse_document(text).root
        outer = root.find("outer").value
        result = set_member(text, outer, "y", 2)
        assert result == '{\n  "outer": {\n    "x": 1,\n    "y": 2\n  }\n}'

    def test_replacing_twice_is_stable(self):
        """Setting the same value again does not change the text."""
        once = _set('{\n  "a": 1\n}', "b", {"c": [1, 2]})
        twice = _set(once, "b", {"c": [1, 2]})
        assert once == twice

    def test_other_bytes_untouched(self):
        """Everything outside the edited member is preserved."""
        text = '{\n  /* keep */ "a": 1, // also keep\n  "b": 2\n}\n'
        result = _set(text, "a", 3)
        assert result == '{\n  /* keep */ "a": 3, // also keep\n  "b": 2\n}\n'


class TestNormalize:
    """Tests for normalize function."""

    def test_pretty_prints_single_line(self):
        """A single-line document without comments is pretty-printed."""
        doc = parse_document('{"a":{"b":1}}')
        assert normalize(doc) == '{\n  "a": {\n    "b": 1\n  }\n}'

    def test_keeps_multiline(self):
        """Multi-line documents are returned unchanged."""
        text = '{\n"a":1}'
        assert normalize(parse_document(text)) == text

    def test_keeps_commented(self):
        """Documents with comments are returned unchanged."""
        text = '{"a": 1} // note'
        assert normalize(parse_document(text)) == text

    def test_keeps_empty_object(self):
        """An empty object is returned unchanged."""
        assert normalize(parse_document("{}")) == "{}"


class TestDetectNewline:
    """Tests for detect_newline function."""

    def test_lf(self):
        """LF documents use LF."""
        assert detect_newline("{\n}") == "\n"

    def test_crlf(self):
        """CRLF documents use CRLF."""
        assert detect_newline("{\r\n}") == "\r\n"
