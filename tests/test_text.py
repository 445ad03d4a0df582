"""
Tokenizer and formatter tests for markovtext.
"""

from __future__ import annotations

from markovtext.text import format_tokens, tokenize


def test_tokenize_splits_words_and_punctuation():
    """
    Punctuation starts its own token, runs of punctuation stay together.
    """
    assert tokenize("Hello, World!  It's fine...\n") == [
        "hello",
        ",",
        "world",
        "!",
        "it",
        "'s",
        "fine",
        "...",
    ]


def test_tokenize_lowercases_ascii_only():
    assert tokenize("ÉCOLE Straße") == ["École", "straße"]


def test_tokenize_empty_text():
    assert tokenize("   \t\n") == []


def test_format_restores_spacing_and_capitals():
    tokens = ["hello", ",", "world", "!", "it", "'s", "fine", ".", "yes", ";", "ok", "?"]
    assert format_tokens(tokens) == "Hello, world! It's fine. Yes; Ok?"


def test_format_empty_sequence():
    assert format_tokens([]) == ""
