"""Tests for approximate text measurement and word wrap."""

import pytest

from tests.conftest import HELLO_TEXT, LONG_TEXT

from panelforge.captions.config import CaptionConfig
from panelforge.captions.text_layout import char_width, estimate_text_block, wrap_words


def test_hello_fits_one_line():
    block = estimate_text_block(HELLO_TEXT, 16, 200, "Comic Sans MS")
    assert block.lines == [HELLO_TEXT]
    assert block.width <= 200
    assert block.height == pytest.approx(16 * 1.3)


def test_width_uses_char_ratio():
    block = estimate_text_block("abcd", 10, 1000, "Arial")
    assert block.width == pytest.approx(4 * 10 * 0.55)


def test_monospace_is_wider():
    assert char_width(10, "Courier Mono") == pytest.approx(6.0)
    assert char_width(10, "Georgia") == pytest.approx(5.5)


def test_long_text_wraps():
    block = estimate_text_block(LONG_TEXT, 16, 200, "Arial")
    assert len(block.lines) > 1
    assert block.width <= 200
    assert block.height == pytest.approx(len(block.lines) * 16 * 1.3)


@pytest.mark.parametrize("text", [
    HELLO_TEXT,
    LONG_TEXT,
    "   spaced    out\twords\n here  ",
    "x",
    "supercalifragilisticexpialidocious is long",
])
@pytest.mark.parametrize("max_width", [1, 40, 200, 10_000])
def test_rejoined_lines_preserve_tokens(text, max_width):
    block = estimate_text_block(text, 14, max_width, "Arial")
    assert len(block.lines) >= 1
    assert " ".join(block.lines) == " ".join(text.split())


def test_overlong_word_sits_alone():
    lines = wrap_words(["a", "enormousword", "b"], max_width=20, cw=5)
    assert lines == ["a", "enormousword", "b"]


def test_overlong_word_width_is_clamped():
    block = estimate_text_block("enormousword", 10, 20, "Arial")
    assert block.lines == ["enormousword"]
    assert block.width == 20


def test_whitespace_only_is_empty():
    block = estimate_text_block("  \n\t ", 16, 200, "Arial")
    assert block.lines == []
    assert block.width == 0
    assert block.height == 0


def test_custom_config():
    config = CaptionConfig(char_width_ratio=1.0, line_height_factor=2.0)
    block = estimate_text_block("ab cd", 10, 1000, "Arial", config)
    assert block.width == pytest.approx(50)
    assert block.height == pytest.approx(20)
