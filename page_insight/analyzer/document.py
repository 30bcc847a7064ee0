"""Thin adapter over a BeautifulSoup tree.

The feature extractors and the link classifier only ever need a handful of
traversal primitives, collected here so that none of them touch the parser
API directly:

    parse_document()   raw markup → tree (parsed exactly once per analysis)
    walk()             depth-first, pre-order element iteration
    iter_elements()    ``walk`` filtered by tag name
    get_attr()         first-occurrence attribute lookup
    attr_values()      every occurrence of an attribute, duplicates included
    own_text()         concatenated immediate text children
    find_doctype()     first top-level doctype declaration
    public_identifier() the PUBLIC literal of a doctype, if any

Traversal relies on ``Tag.descendants`` which is a generator, not recursion,
so very deep documents do not hit the interpreter's recursion limit.
"""

from __future__ import annotations

import re
from typing import Iterator

from bs4 import BeautifulSoup
from bs4.element import Doctype, NavigableString, PreformattedString, Tag

from page_insight.errors import AnalysisError

_PUBLIC_ID_RE = re.compile(r"\bPUBLIC\s*([\"'])(.*?)\1", re.IGNORECASE | re.DOTALL)

# html.parser lower-cases attribute names, so this key cannot clash with markup.
_DUPLICATES_KEY = "DUPLICATE-ATTRIBUTES"


def _keep_first(attrs: dict, key: str, value: str) -> None:
    attrs.setdefault(_DUPLICATES_KEY, []).append((key, value))


def parse_document(raw: bytes | str) -> BeautifulSoup:
    """Parse *raw* markup into a tree.

    Duplicate attributes keep their first occurrence, matching how browsers
    resolve ``<a href="x" href="y">``.  Later occurrences stay reachable
    through :func:`attr_values`.

    Raises:
        AnalysisError: If the parser cannot process the input at all.
    """
    if not isinstance(raw, (bytes, str)):
        raise AnalysisError(f"parsing HTML: expected bytes or str, got {type(raw).__name__}")
    try:
        return BeautifulSoup(raw, "html.parser", on_duplicate_attribute=_keep_first)
    except Exception as exc:
        raise AnalysisError(f"parsing HTML: {exc}") from exc


def walk(node: Tag) -> Iterator[Tag]:
    """Yield *node* and every element below it in document order."""
    yield node
    for descendant in node.descendants:
        if isinstance(descendant, Tag):
            yield descendant


def iter_elements(node: Tag, name: str) -> Iterator[Tag]:
    for element in walk(node):
        if element.name == name:
            yield element


def get_attr(element: Tag, key: str) -> str | None:
    """Return the value of attribute *key*, or ``None`` when it is absent.

    Multi-valued attributes (``class``, ``rel`` …) are joined back into the
    space-separated form they had in the markup.
    """
    value = element.get(key)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def attr_values(element: Tag, key: str) -> list[str]:
    """Return every value *key* was given in the markup, first occurrence first."""
    first = get_attr(element, key)
    values = [] if first is None else [first]
    for name, value in element.attrs.get(_DUPLICATES_KEY, ()):
        if name == key:
            values.append(value)
    return values


def _is_text(node: object) -> bool:
    # Comments, CDATA and declarations subclass PreformattedString.
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def own_text(element: Tag) -> str:
    """Concatenate the immediate text children of *element*, ignoring nested markup."""
    return "".join(str(child) for child in element.children if _is_text(child))


def find_doctype(document: BeautifulSoup) -> Doctype | None:
    for child in document.contents:
        if isinstance(child, Doctype):
            return child
    return None


def public_identifier(doctype: Doctype) -> str | None:
    """Return the public identifier literal of *doctype*, or ``None``.

    ``<!DOCTYPE html>`` and ``SYSTEM``-only declarations have none.
    """
    match = _PUBLIC_ID_RE.search(str(doctype))
    if match is None:
        return None
    return match.group(2)
