"""Word-presence diff used to highlight what is new in a revised clause.

This is deliberately one-sided: every word of ``revised`` is emitted in
order, flagged as added when it never occurs in ``base``. Removed words,
moves and repeated words are not detected.
"""
from __future__ import annotations
import html
from typing import Iterable, Iterator, List

from juriscompare.utils.types import DiffFragment


def _words(text: str) -> List[str]:
    # str.split() yields no tokens for "" or whitespace-only input
    return text.split()


def iter_diff(base: str, revised: str) -> Iterator[DiffFragment]:
    base_words = set(_words(base))
    for word in _words(revised):
        yield DiffFragment(value=word + " ", added=word not in base_words)


def word_diff(base: str, revised: str) -> List[DiffFragment]:
    return list(iter_diff(base, revised))


def render_html(fragments: Iterable[DiffFragment], css_class: str = "diff-added") -> str:
    """Escape fragment text and wrap added words in a ``<mark>``."""
    out = []
    for frag in fragments:
        text = html.escape(frag.value.rstrip(" "))
        if frag.added:
            out.append(f"<mark class='{css_class}'>{text}</mark> ")
        else:
            out.append(text + " ")
    return "".join(out).rstrip(" ")
