"""
Tokenization and formatting of prose for markovtext.
"""

from __future__ import annotations

import string
from typing import List, Sequence

from .constants import SENTENCE_TERMINALS

_PUNCTUATION = frozenset(string.punctuation)


def _ascii_lower(character: str) -> str:
    return character.lower() if character.isascii() else character


def tokenize(text: str) -> List[str]:
    """
    Split prose into lowercase word and punctuation tokens.

    Whitespace separates tokens and is never emitted. An ASCII punctuation character starts
    a new token unless the current token already ends in punctuation, so runs such as
    ``"?!"`` stay together.

    :param text: Raw text.
    :type text: str
    :return: Ordered tokens.
    :rtype: list[str]
    """
    tokens: List[str] = []
    current: List[str] = []

    def finish_token() -> None:
        if current:
            tokens.append("".join(current))
            current.clear()

    for character in text:
        if character.isspace():
            finish_token()
        elif character in _PUNCTUATION:
            if not (current and current[-1] in _PUNCTUATION):
                finish_token()
            current.append(character)
        else:
            current.append(_ascii_lower(character))

    finish_token()
    return tokens


def _capitalize(token: str) -> str:
    if not token:
        return token
    return token[0].upper() + token[1:]


def format_tokens(tokens: Sequence[str]) -> str:
    """
    Join generated tokens back into prose.

    :param tokens: Generated tokens.
    :type tokens: Sequence[str]
    :return: Text with spacing and sentence capitalization restored.
    :rtype: str
    """
    parts: List[str] = []
    capitalize_next = True
    for token in tokens:
        first = token[:1]
        if parts and first and first not in _PUNCTUATION:
            parts.append(" ")

        if capitalize_next:
            capitalize_next = False
            parts.append(_capitalize(token))
        else:
            parts.append(token)

        if first in SENTENCE_TERMINALS:
            capitalize_next = True
    return "".join(parts)
