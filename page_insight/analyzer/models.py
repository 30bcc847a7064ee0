"""Data models produced by the analysis engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

HEADING_TAGS: tuple[str, ...] = ("h1", "h2", "h3", "h4", "h5", "h6")


class HtmlVersion(str, Enum):
    """Labels reported for the detected document type."""

    HTML5 = "HTML5"
    XHTML_11 = "XHTML 1.1"
    XHTML_10_STRICT = "XHTML 1.0 Strict"
    XHTML_10_TRANSITIONAL = "XHTML 1.0 Transitional"
    XHTML_10_FRAMESET = "XHTML 1.0 Frameset"
    HTML_401_STRICT = "HTML 4.01 Strict"
    HTML_401_TRANSITIONAL = "HTML 4.01 Transitional"
    HTML_401_FRAMESET = "HTML 4.01 Frameset"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Link:
    """A hyperlink resolved against the page's base URL."""

    url: str
    is_internal: bool


@dataclass(frozen=True)
class AnalysisResult:
    """Structured summary of a single page."""

    html_version: HtmlVersion
    title: str
    headings: dict[str, int] = field(default_factory=dict)
    internal_links: int = 0
    external_links: int = 0
    inaccessible_links: int = 0
    has_login_form: bool = False

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------
    @property
    def total_links(self) -> int:
        return self.internal_links + self.external_links

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON wire shape (camelCase keys)."""
        return {
            "htmlVersion": self.html_version.value,
            "title": self.title,
            "headings": {tag: self.headings.get(tag, 0) for tag in HEADING_TAGS},
            "internalLinks": self.internal_links,
            "externalLinks": self.external_links,
            "inaccessibleLinks": self.inaccessible_links,
            "hasLoginForm": self.has_login_form,
        }
