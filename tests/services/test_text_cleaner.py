"""Tests for USFM text cleaning rules."""

# pylint: disable=missing-function-docstring

import pytest

from bible_import.services import text_cleaner
from bible_import.services.text_cleaner import (
    CLEANING_STEPS,
    clean,
    normalize_whitespace,
    strip_cross_references,
    strip_footnotes,
    strip_symbols,
    strip_tags,
    strip_word_attributes,
)


def test_steps_run_in_documented_order():
    assert CLEANING_STEPS == (
        strip_footnotes,
        strip_cross_references,
        strip_tags,
        strip_word_attributes,
        strip_symbols,
        normalize_whitespace,
    )


def test_strip_footnotes_removes_markers_and_content():
    raw = r"God\f + \fr 1:1 \ft Hebrew: Elohim\f* created"
    assert strip_footnotes(raw) == "God created"


def test_strip_footnotes_is_non_greedy():
    raw = r"a\f + one\f* b\f + two\f* c"
    assert strip_footnotes(raw) == "a b c"


def test_strip_cross_references_removes_content():
    raw = r"light\x - \xo 1:3 \xt 2 Cor 4:6\x* and"
    assert strip_cross_references(raw) == "light and"


def test_strip_tags_keeps_wrapped_text():
    assert strip_tags(r"\wj Follow me\wj*") == " Follow me"
    assert strip_tags(r"\add it was\add* so") == " it was so"
    assert strip_tags(r"\+wj nested\+wj*") == " nested"


def test_strip_word_attributes():
    assert strip_word_attributes('grace|strong="G5485"') == "grace"
    assert (
        strip_word_attributes('beginning|lemma="רֵאשִׁית" strong="H7225" x-morph="He,Ncfsa" rest')
        == "beginning rest"
    )
    assert strip_word_attributes("gracious|grace") == "gracious"


def test_strip_symbols():
    assert strip_symbols("¶ And it came to pass† ‡¦") == " And it came to pass "


def test_normalize_whitespace():
    assert normalize_whitespace("  a \t b\n\nc  ") == "a b c"


def test_clean_genesis_with_words_of_jesus_tag():
    raw = r"In the beginning God created\wj the heavens\wj* and the earth."
    assert clean(raw) == "In the beginning God created the heavens and the earth."


def test_clean_word_level_markup():
    raw = r'\w In|strong="H7225"\w* \w the|strong="H0853"\w* \w beginning|strong="H7225"\w*'
    assert clean(raw) == "In the beginning"


def test_clean_footnote_characters_vanish():
    raw = r"Jesus wept.\f + \fr 11:35 \ft secret-footnote-words\f*"
    cleaned = clean(raw)
    assert cleaned == "Jesus wept."
    assert "secret" not in cleaned
    assert "\\" not in cleaned


def test_clean_keeps_footnote_removal_before_tag_stripping():
    # Tag stripping first would leave the footnote body behind.
    raw = r"word\f + \ft note body\f* after"
    assert clean(raw) == "word after"


@pytest.mark.parametrize("raw", ["", None, "   ", r"\p", r"\f + \ft only a note\f*", "¶"])
def test_clean_can_return_empty(raw):
    assert clean(raw) == ""


def test_clean_reruns_when_removal_exposes_markup():
    assert clean("\\¶wj text") == "text"


@pytest.mark.parametrize(
    "raw",
    [
        r"In the beginning God created\wj the heavens\wj* and the earth.",
        r"word\f + note\f*  \x - ref\x* tail ¶",
        "\\\\wj*abc",
        "\\¶wj text",
        'x|a="1" |b',
        r"unclosed \f + footnote body",
        "\t\n mixed   whitespace   here",
    ],
)
def test_clean_is_idempotent(raw):
    once = clean(raw)
    assert clean(once) == once


def test_clean_never_raises_on_odd_input():
    for raw in ["\\", "\\*", "|", '"', "\\f*", "\\x*", "|=\"\""]:
        assert isinstance(text_cleaner.clean(raw), str)
