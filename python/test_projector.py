"""
Tests for CodeInstance edit projection — replace / highlight / reformat.

Run: python3 test_projector.py
From: python/
"""

import re
import sys

sys.path.insert(0, '.')

from codedoc.diff import generate_edits_from_text
from codedoc.parser.instance import CodeInstance
from codedoc.requests import DeleteContentRange, InsertText, UpdateTextStyle
from codedoc.style.colors import Color
from codedoc.style.languages import Shortcut, get_language
from codedoc.utils.utf16 import text_width16

RED = Color.from_hex("#FF0000")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _instance(code, start_index=0, language="go"):
    inst = CodeInstance(code=code, start_index=start_index, language=get_language(language))
    inst.map_to_utf16()
    return inst


def _spans(reqs):
    return [(r.range.start_index, r.range.end_index) for r in reqs]


def _apply_ascii(text, base, reqs):
    """Applies delete/insert requests to ASCII text whose first char sits at `base`."""
    for req in reqs:
        if isinstance(req, DeleteContentRange):
            start = req.range.start_index - base
            end = req.range.end_index - base
            text = text[:start] + text[end:]
        elif isinstance(req, InsertText):
            at = req.index - base
            text = text[:at] + req.text + text[at:]
    return text


def _check_invariant(inst):
    assert inst.end_index - inst.start_index == text_width16(inst.code)


# ---------------------------------------------------------------------------
# Highlight
# ---------------------------------------------------------------------------

def test_highlight_for_after_multibyte_text():
    inst = _instance("é😀 for(int i=0;i<n;i++) for(){}", start_index=10)
    before = (inst.code, inst.end_index)

    reqs = inst.highlight(re.compile(r"\bfor\b"), RED)
    assert len(reqs) == 2
    # "é😀 " is 4 units; second "for" sits 21 code points after the first
    assert _spans(reqs) == [(14, 17), (35, 38)]
    assert all(isinstance(r, UpdateTextStyle) and r.foreground_color == RED for r in reqs)

    assert (inst.code, inst.end_index) == before
    print("PASS: highlight 'for' at utf16 offsets")


def test_highlight_match_containing_surrogate_pair():
    inst = _instance('x = "😀";', start_index=1)
    reqs = inst.highlight(re.compile(r'"[^"]*"'), RED)
    assert _spans(reqs) == [(5, 9)]
    print("PASS: highlight span covers surrogate pair")


def test_highlight_skips_empty_matches():
    inst = _instance("abc")
    assert inst.highlight(re.compile(r"x*"), RED) == []
    print("PASS: highlight ignores empty matches")


def test_highlight_remaps_after_code_change():
    inst = _instance("a b", start_index=5)
    inst.code = "😀 b"
    inst.end_index = 5 + text_width16(inst.code)
    reqs = inst.highlight(re.compile(r"b"), RED)
    assert _spans(reqs) == [(8, 9)]
    print("PASS: highlight rebuilds the offset map when code changed")


def test_highlight_segment_id():
    inst = _instance("for", start_index=3)
    reqs = inst.highlight(re.compile("for"), RED, segment_id="kix.header")
    assert reqs[0].range.segment_id == "kix.header"
    assert reqs[0].to_api()["updateTextStyle"]["range"]["segmentId"] == "kix.header"
    print("PASS: highlight carries the segment id")


# ---------------------------------------------------------------------------
# Replace
# ---------------------------------------------------------------------------

def test_replace_with_multibyte_replacement():
    inst = _instance("😀 foo foo", start_index=5)
    assert inst.end_index == 15

    reqs = inst.replace(Shortcut(re.compile(r"\bfoo\b"), "bar😀"))
    assert [type(r) for r in reqs] == [DeleteContentRange, InsertText, DeleteContentRange, InsertText]
    assert _spans([reqs[0], reqs[2]]) == [(8, 11), (14, 17)]
    assert reqs[1].index == 8 and reqs[1].text == "bar😀"
    assert reqs[3].index == 14

    assert inst.code == "😀 bar😀 bar😀"
    assert inst.end_index == 19
    _check_invariant(inst)
    print("PASS: replace keeps end_index in step with code")


def test_replace_locates_the_match_not_an_earlier_copy():
    """'foo' inside 'xfoo' is not a whole-word match and must not be deleted."""
    inst = _instance("xfoo foo", start_index=100)
    reqs = inst.replace(Shortcut(re.compile(r"\bfoo\b"), "bar"))
    assert _spans([reqs[0]]) == [(105, 108)]
    assert _apply_ascii("xfoo foo", 100, reqs) == "xfoo bar" == inst.code
    print("PASS: replace edits the matched occurrence")


def test_replace_language_shortcuts():
    inst = _instance("func f() error {\nIFERR\n}\n", start_index=1)
    original = inst.code
    reqs = []
    for shortcut in inst.language.compiled_shortcuts():
        reqs.extend(inst.replace(shortcut))

    assert "if err != nil {\n\treturn err\n}" in inst.code
    assert "IFERR" not in inst.code
    assert _apply_ascii(original, 1, reqs) == inst.code
    _check_invariant(inst)
    print("PASS: go shortcuts replaced case-insensitively")


def test_replace_terminates_when_replacement_cannot_match():
    inst = _instance("a a a", start_index=0)
    reqs = inst.replace(Shortcut(re.compile(r"a"), "b"))
    assert len(reqs) == 6
    assert inst.code == "b b b"
    _check_invariant(inst)
    print("PASS: replace runs until no match is left")


def test_replace_no_match_and_empty_match():
    inst = _instance("nothing here", start_index=2)
    assert inst.replace(Shortcut(re.compile(r"\bzzz\b"), "y")) == []
    assert inst.replace(Shortcut(re.compile(r"q*"), "y")) == []
    assert inst.code == "nothing here"
    _check_invariant(inst)
    print("PASS: replace without matches emits nothing")


def test_replace_then_highlight_uses_new_offsets():
    inst = _instance("😀 sout", start_index=1, language="java")
    for shortcut in inst.language.compiled_shortcuts():
        inst.replace(shortcut)
    inst.map_to_utf16()
    reqs = inst.highlight(re.compile(r"println"), RED)
    # "😀 System.out." is 2 + 1 + 11 units
    assert _spans(reqs) == [(15, 22)]
    print("PASS: highlight after replace")


# ---------------------------------------------------------------------------
# Map / reformat / comments
# ---------------------------------------------------------------------------

def test_map_to_utf16_requires_code():
    inst = CodeInstance(code="", start_index=4)
    try:
        inst.map_to_utf16()
    except ValueError:
        pass
    else:
        raise AssertionError("expected ValueError for empty code")
    print("PASS: map_to_utf16 rejects empty code")


def test_map_to_utf16_resets_end_index():
    inst = CodeInstance(code="a😀\n", start_index=7, end_index=0)
    inst.map_to_utf16()
    assert inst.end_index == 11
    print("PASS: map_to_utf16 resets end_index")


def test_reformat():
    original = "x  :=  1\nif x {\nreturn\n}\n"
    formatted = "x := 1\nif x {\n\treturn\n}\n"
    inst = _instance(original, start_index=20)

    reqs = inst.reformat(formatted)
    assert reqs
    assert _apply_ascii(original, 20, reqs) == formatted
    assert inst.code == formatted
    _check_invariant(inst)

    assert inst.reformat(formatted) == []
    print("PASS: reformat emits sequential edits")


def test_generate_edits_multibyte_positions():
    reqs = generate_edits_from_text("😀 a b", "😀 a c", 1)
    deletes = [r for r in reqs if isinstance(r, DeleteContentRange)]
    inserts = [r for r in reqs if isinstance(r, InsertText)]
    assert _spans(deletes) == [(6, 7)]
    assert inserts[0].index == 6 and inserts[0].text == "c"
    print("PASS: diff edits positioned in utf16 units")


def test_comment_words():
    inst = _instance("int x; // hi\ny /* z */\n", start_index=100, language="java")
    comments = inst.comment_words()
    assert [c.content for c in comments] == ["// hi\n", "/* z */"]
    assert comments[0].index == 107
    assert comments[1].index == 115

    assert CodeInstance(code="x").comment_words() == []
    print("PASS: comment_words positioned in document units")


if __name__ == "__main__":
    tests = [
        test_highlight_for_after_multibyte_text,
        test_highlight_match_containing_surrogate_pair,
        test_highlight_skips_empty_matches,
        test_highlight_remaps_after_code_change,
        test_highlight_segment_id,
        test_replace_with_multibyte_replacement,
        test_replace_locates_the_match_not_an_earlier_copy,
        test_replace_language_shortcuts,
        test_replace_terminates_when_replacement_cannot_match,
        test_replace_no_match_and_empty_match,
        test_replace_then_highlight_uses_new_offsets,
        test_map_to_utf16_requires_code,
        test_map_to_utf16_resets_end_index,
        test_reformat,
        test_generate_edits_multibyte_positions,
        test_comment_words,
    ]

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {test.__name__}: {e}")
            import traceback
            traceback.print_exc()
            failed += 1

    print(f"\n{'='*60}")
    print(f"Results: {passed} passed, {failed} failed out of {len(tests)} tests")
    if failed == 0:
        print("ALL TESTS PASSED")
    else:
        print("SOME TESTS FAILED")
