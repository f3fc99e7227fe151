"""
Tests for the Char stream builder (codedoc.parser.chars) and the word
tokenizer (codedoc.parser.words).

Run: python3 test_chars.py
From: python/
"""

import sys

sys.path.insert(0, '.')

from codedoc.models import Body, Char, Document, Paragraph, ParagraphElement, StructuralElement, TextRun, TextStyle
from codedoc.parser.chars import chars_from_text, get_chars, get_range
from codedoc.parser.words import get_words, is_space, split_fields, strip_space
from codedoc.utils.utf16 import text_width16


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _doc(*texts, start=1):
    """One paragraph element per text, indexed back to back in utf16 units."""
    elements = []
    index = start
    for text in texts:
        size = text_width16(text)
        elements.append(
            ParagraphElement(start_index=index, end_index=index + size, text_run=TextRun(content=text, text_style=TextStyle()))
        )
        index += size
    return Document(body=Body(content=[StructuralElement(start_index=start, end_index=index, paragraph=Paragraph(elements=elements))]))


def _text(chars):
    return "".join(c.content for c in chars)


# ---------------------------------------------------------------------------
# Stream builder
# ---------------------------------------------------------------------------

def test_chars_from_text():
    chars = chars_from_text("a😀b", 5)
    assert [c.index for c in chars] == [5, 6, 8]
    assert [c.size for c in chars] == [1, 2, 1]
    assert chars[1] == Char(6, 2, "😀")
    assert chars_from_text("") == []
    print("PASS: chars_from_text")


def test_get_chars_region():
    doc = _doc("intro\n", "~~begin~~\n", "int x😀\n", "y\n", "~~END~~\n", "after\n")
    chars = get_chars(doc)
    assert _text(chars) == "int x😀\ny\n"
    # "intro\n" + "~~begin~~\n" come first
    assert chars[0].index == 1 + 6 + 10
    # the emoji occupies two units, so the newline after it is 3 past "x"
    x = next(c for c in chars if c.content == "x")
    assert chars[chars.index(x) + 2].index == x.index + 3
    print("PASS: get_chars region between sentinels")


def test_get_chars_sentinels_trimmed_and_case_insensitive():
    doc = _doc("  ~~BeGiN~~  \n", "code\n", " ~~end~~\n")
    assert _text(get_chars(doc)) == "code\n"
    print("PASS: get_chars sentinel matching")


def test_get_chars_without_begin():
    assert get_chars(_doc("just text\n", "~~end~~\n")) == []
    print("PASS: get_chars without begin sentinel")


def test_get_chars_end_before_begin():
    doc = _doc("~~end~~\n", "~~begin~~\n", "code\n")
    assert get_chars(doc) == []
    print("PASS: get_chars end before begin")


def test_get_chars_without_end():
    doc = _doc("~~begin~~\n", "a\n", "b\n")
    assert _text(get_chars(doc)) == "a\nb\n"
    print("PASS: get_chars runs to end without end sentinel")


def test_get_chars_custom_sentinels():
    doc = _doc("[[start]]\n", "x\n", "[[stop]]\n")
    assert _text(get_chars(doc, "[[start]]", "[[stop]]")) == "x\n"
    print("PASS: get_chars custom sentinels")


def test_get_range():
    chars = chars_from_text("ab😀", 10)
    assert get_range(chars) == (10, 14)
    try:
        get_range([])
    except ValueError:
        pass
    else:
        raise AssertionError("expected ValueError for empty Chars")
    print("PASS: get_range")


# ---------------------------------------------------------------------------
# Word tokenizer
# ---------------------------------------------------------------------------

def test_get_words_space_runs():
    words = get_words(chars_from_text("a  bb   c"))
    assert [w.content for w in words] == ["a", "bb", "c"]
    assert [w.index for w in words] == [0, 3, 8]
    assert [w.size for w in words] == [1, 2, 1]
    print("PASS: get_words collapses whitespace runs")


def test_get_words_utf16_sizes():
    words = get_words(chars_from_text("😀x\tfoo\nbär", 100))
    assert [w.content for w in words] == ["😀x", "foo", "bär"]
    assert words[0].index == 100 and words[0].size == 3
    assert words[1].index == 104
    assert words[2].index == 108 and words[2].end == 111
    print("PASS: get_words utf16 sizes")


def test_get_words_edges():
    assert get_words([]) == []
    assert get_words(chars_from_text("   \n\t")) == []
    words = get_words(chars_from_text("  trailing"))
    assert len(words) == 1 and words[0].content == "trailing" and words[0].index == 2
    print("PASS: get_words edge cases")


def test_information_separators_are_not_space():
    words = get_words(chars_from_text("a\x1fb c\u3000d e"))
    assert [w.content for w in words] == ["a\x1fb", "c", "d", "e"]
    assert words[0].size == 3

    assert split_fields(" <code>\x1c<conf>\t#lang=go ") == ["<code>\x1c<conf>", "#lang=go"]
    assert strip_space("\x1e~~begin~~ \n") == "\x1e~~begin~~"
    assert is_space(" ") and not is_space("\x1d") and not is_space("")
    print("PASS: \\x1c-\\x1f separators stay inside words")


if __name__ == "__main__":
    tests = [
        test_chars_from_text,
        test_get_chars_region,
        test_get_chars_sentinels_trimmed_and_case_insensitive,
        test_get_chars_without_begin,
        test_get_chars_end_before_begin,
        test_get_chars_without_end,
        test_get_chars_custom_sentinels,
        test_get_range,
        test_get_words_space_runs,
        test_get_words_utf16_sizes,
        test_get_words_edges,
        test_information_separators_are_not_space,
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
