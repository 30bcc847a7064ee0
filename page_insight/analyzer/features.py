"""Stateless feature extractors over a parsed document.

Each function reads the tree without mutating it, so they can run in any
order over the same document.
"""

from __future__ import annotations

from bs4 import BeautifulSoup
from bs4.element import Doctype, Tag

from page_insight.analyzer.document import (
    attr_values,
    find_doctype,
    iter_elements,
    own_text,
    public_identifier,
    walk,
)
from page_insight.analyzer.models import HEADING_TAGS, HtmlVersion

_LOGIN_NAME_MARKERS = ("password", "login")


# ---------------------------------------------------------------------------
# Doctype / version
# ---------------------------------------------------------------------------

def detect_html_version(document: BeautifulSoup) -> HtmlVersion:
    """Classify the document type from its doctype declaration."""
    doctype = find_doctype(document)
    if doctype is None:
        return HtmlVersion.UNKNOWN
    return classify_doctype(doctype)


def _sub_variant(
    pub: str, strict: HtmlVersion, frameset: HtmlVersion, transitional: HtmlVersion
) -> HtmlVersion:
    if "strict" in pub:
        return strict
    if "frameset" in pub:
        return frameset
    return transitional


def classify_doctype(doctype: Doctype) -> HtmlVersion:
    """Map a doctype's public identifier onto an :class:`HtmlVersion`.

    Matching is by lower-cased substring, first hit wins:
    ``xhtml 1.1`` → ``xhtml 1.0`` → ``html 4.01`` → Unknown.
    """
    pub = (public_identifier(doctype) or "").lower()
    if not pub:
        return HtmlVersion.HTML5

    if "xhtml 1.1" in pub:
        return HtmlVersion.XHTML_11
    if "xhtml 1.0" in pub:
        return _sub_variant(
            pub,
            HtmlVersion.XHTML_10_STRICT,
            HtmlVersion.XHTML_10_FRAMESET,
            HtmlVersion.XHTML_10_TRANSITIONAL,
        )
    if "html 4.01" in pub:
        return _sub_variant(
            pub,
            HtmlVersion.HTML_401_STRICT,
            HtmlVersion.HTML_401_FRAMESET,
            HtmlVersion.HTML_401_TRANSITIONAL,
        )
    return HtmlVersion.UNKNOWN


# ---------------------------------------------------------------------------
# Title / headings
# ---------------------------------------------------------------------------

def extract_title(document: BeautifulSoup) -> str:
    """Return the text of the first ``<title>`` element, or an empty string."""
    title = next(iter_elements(document, "title"), None)
    if title is None:
        return ""
    return own_text(title)


def count_headings(document: BeautifulSoup) -> dict[str, int]:
    """Count ``h1``..``h6`` elements; every level is always present."""
    counts = {tag: 0 for tag in HEADING_TAGS}
    for element in walk(document):
        if element.name in counts:
            counts[element.name] += 1
    return counts


# ---------------------------------------------------------------------------
# Login form heuristic
# ---------------------------------------------------------------------------

def _is_login_input(element: Tag) -> bool:
    # Duplicated attributes are all considered, not only the first.
    if any(value.lower() == "password" for value in attr_values(element, "type")):
        return True
    for key in ("name", "id"):
        for value in attr_values(element, key):
            if any(marker in value.lower() for marker in _LOGIN_NAME_MARKERS):
                return True
    return False


def has_login_form(document: BeautifulSoup) -> bool:
    """Return ``True`` if any ``<form>`` contains a password/login-looking input.

    Heuristic: an ``<input>`` with ``type="password"``, or whose ``name`` or
    ``id`` contains "password" or "login" anywhere (so ``loginout`` matches
    too).  Inputs outside a form are ignored.
    """
    for form in iter_elements(document, "form"):
        if any(_is_login_input(el) for el in iter_elements(form, "input")):
            return True
    return False
