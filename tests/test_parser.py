"""Tests for the parser state machine."""

import pytest

from vdf_core import Node, Parser, StructuralError, parse
from vdf_core.state import ParserState


VDF_SAMPLE = (
    '"root_node"\n'
    "{\n"
    '    "first_sub_node"\n'
    "    {\n"
    '        "first"     "value1"\n'
    '        "second"    "value2"\n'
    "    }\n"
    '    "second_sub_node"\n'
    "    {\n"
    '        "third_sub_node"\n'
    "        {\n"
    '            "fourth"    "value4"\n'
    "        }\n"
    '        "third"     "value3"\n'
    "    }\n"
    "}"
)

VDF_SAMPLE_MULTIMAP = (
    '"root_node"\n'
    "{\n"
    '    "sub_node"\n'
    "    {\n"
    '        "key"       "value1"\n'
    '        "key"       "value2"\n'
    "    }\n"
    '    "sub_node"\n'
    "    {\n"
    '        "key"       "value3"\n'
    '        "key"       "value4"\n'
    "    }\n"
    "}"
)


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


def test_simple():
    root = parse("key value")
    assert root.count("key") == 1
    assert root.get_string("key") == "value"


def test_quotes():
    root = parse('"key with space" "value with space"')
    assert root.get_string("key with space") == "value with space"


def test_escape():
    root = parse('"key with \\"" "value with \\" " "newline" "val\\n\\nue"')
    assert root.get_string('key with "') == 'value with " '
    assert root.get_string("newline") == "val\n\nue"


def test_escaped_backslash():
    root = parse('"path" "C:\\\\games\\\\"')
    assert root.get_string("path") == "C:\\games\\"


def test_escaped_braces_in_bare_word():
    root = parse("key a\\{b\\}")
    assert root.get_string("key") == "a{b}"


def test_braces_inside_quotes_are_literal():
    root = parse('"key" "{not a node}"')
    assert root.get_string("key") == "{not a node}"


def test_null_key_value():
    root = parse('"key" "" "spacer" "spacer" "" "value"')
    assert root.get_string("key") == ""
    assert root.get_string("") == "value"
    assert "missing" not in root


def test_subsequent_key_value():
    root = parse('"key""value"')
    assert root.get_string("key") == "value"


def test_tab_inside_quotes_kept():
    root = parse('"key" "a\tb"')
    assert root.get_string("key") == "a\tb"


def test_trailing_key_without_value_is_dropped():
    root = parse("key value orphan")
    assert root.keys() == ["key"]


def test_comments_and_conditionals_ignored():
    root = parse(
        "// header\n"
        '"key" "value" [$X360]\n'
        '"other" "thing" // trailing\n'
    )
    assert root.get_string("key") == "value"
    assert root.get_string("other") == "thing"


# ---------------------------------------------------------------------------
# Sub-nodes
# ---------------------------------------------------------------------------


def test_child():
    root = parse("root { child { key value } }")
    assert root.get_sub_node("root").get_sub_node("child").get_string("key") == "value"


def test_bare_key_glued_to_brace():
    root = parse("root{ key value }")
    assert root.get_sub_node("root").get_string("key") == "value"


def test_empty_sub_node():
    root = parse('"empty" {}')
    assert len(root.get_sub_node("empty")) == 0


def test_sample():
    root = parse(VDF_SAMPLE)
    assert isinstance(root.get_sub_node("root_node"), Node)
    first = root.get_sub_node("root_node").get_sub_node("first_sub_node")
    assert first.get_string("first") == "value1"
    assert first.get_string("second") == "value2"
    second = root.get_sub_node("root_node").get_sub_node("second_sub_node")
    assert second.get_string("third") == "value3"
    assert second.get_sub_node("third_sub_node").get_string("fourth") == "value4"


def test_multimap():
    root = parse(VDF_SAMPLE_MULTIMAP)
    node = root.get_sub_node("root_node")
    assert node.count("sub_node") == 2
    assert node.get_sub_node("sub_node", 0).get_string("key") == "value1"
    assert node.get_sub_node("sub_node", 1).get_string("key", 1) == "value4"


def test_parse_accepts_lines():
    root = parse(['"a"', "{", '"b" "c"', "}"])
    assert root.get_sub_node("a").get_string("b") == "c"


def test_windows_line_endings():
    root = parse('"a"\r\n{\r\n"b" "c"\r\n}\r\n')
    assert root.get_sub_node("a").get_string("b") == "c"


# ---------------------------------------------------------------------------
# Structural errors
# ---------------------------------------------------------------------------


def test_underflow():
    with pytest.raises(StructuralError) as ei:
        parse("root_node { child_node { key value }")
    assert "'{'" in str(ei.value)


def test_overflow():
    with pytest.raises(StructuralError) as ei:
        parse("root_node { child_node { key value } } }")
    assert "'}'" in str(ei.value)


def test_lone_closing_brace():
    with pytest.raises(StructuralError):
        parse("}")


def test_escaped_brace_is_not_structural():
    root = parse("key \\}")
    assert root.get_string("key") == "}"


# ---------------------------------------------------------------------------
# Parser configuration
# ---------------------------------------------------------------------------


def test_custom_preprocessor():
    seen = []

    def preprocess(lines):
        lines = list(lines)
        seen.extend(lines)
        return " ".join(lines)

    root = Parser(preprocess=preprocess).parse("a b\nc d")
    assert seen == ["a b", "c d"]
    assert root.get_string("c") == "d"


def test_each_parse_returns_a_new_tree():
    parser = Parser()
    first = parser.parse("a b")
    second = parser.parse("a b")
    assert first == second
    assert first is not second


# ---------------------------------------------------------------------------
# ParserState transitions
# ---------------------------------------------------------------------------


def test_state_starts_at_root():
    state = ParserState()
    assert state.current is state.root
    assert state.stack == [state.root]


def test_state_space_toggles_key_and_value():
    state = ParserState()
    for c in "key":
        state.character(c)
    state.space()
    assert state.value_pending
    assert state.key_name == "key"
    for c in "val":
        state.character(c)
    state.space()
    assert not state.value_pending
    assert state.root.get_string("key") == "val"


def test_state_ignores_meaningless_space():
    state = ParserState()
    state.space()
    state.space()
    assert not state.value_pending
    assert len(state.root) == 0


def test_state_double_escape_emits_backslash():
    state = ParserState()
    state.escape()
    state.escape()
    assert state.buffer == ["\\"]
    assert not state.escape_pending


def test_state_escape_n_is_newline():
    state = ParserState()
    state.escape()
    state.character("n")
    assert state.buffer == ["\n"]


def test_state_end_parse_with_open_node_fails():
    state = ParserState()
    for c in "k":
        state.character(c)
    state.space()
    state.begin_sub_node()
    with pytest.raises(StructuralError):
        state.end_parse()
