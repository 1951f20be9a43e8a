"""Page Content Extraction — turns fetched HTML into prompt-ready text.

Invariants:
    - PURE: operates on an HTML string, never fetches
    - script/style/noscript elements are dropped before text is read
    - Text is whitespace-collapsed and truncated to max_chars (+ "...")

Design Decisions:
    - BeautifulSoup with the lxml parser: tolerant of malformed markup, reads
      attributes in any order and decodes entities
    - Body text only when a <body> exists, so the <title> is not repeated in text
"""

from dataclasses import dataclass

from bs4 import BeautifulSoup

DEFAULT_MAX_CHARS = 4000

_DROPPED_TAGS = ("script", "style", "noscript")


@dataclass(frozen=True)
class PageContent:
    """Result of fetching a source page. success=False carries the error."""
    success: bool
    title: str = ""
    description: str = ""
    text: str = ""
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> "PageContent":
        return cls(success=False, error=error)


def _collapse(value: str) -> str:
    return " ".join(value.split())


def _is_description(name) -> bool:
    return bool(name) and name.strip().lower() == "description"


def extract_page_content(raw_html: str, max_chars: int = DEFAULT_MAX_CHARS) -> PageContent:
    soup = BeautifulSoup(raw_html, "lxml")

    title = _collapse(soup.title.get_text()) if soup.title else ""

    description = ""
    meta = soup.find("meta", attrs={"name": _is_description})
    if meta and meta.get("content"):
        description = _collapse(meta["content"])

    for tag in soup(_DROPPED_TAGS):
        tag.decompose()
    root = soup.body or soup
    text = _collapse(root.get_text(" ", strip=True))
    if len(text) > max_chars:
        text = text[:max_chars] + "..."

    return PageContent(success=True, title=title, description=description, text=text)
