from __future__ import annotations

import re

from bs4 import BeautifulSoup

from dive.config import settings

# Subtrees dropped before any text is read.
NOISE_SELECTORS = (
    "script",
    "style",
    "noscript",
    "iframe",
    "svg",
    "nav",
    "header",
    "footer",
    "aside",
    '[role="navigation"]',
    ".ad",
    ".advertisement",
    ".sidebar",
)

# Priority order; the first selector with at least one match wins.
CONTENT_SELECTORS = (
    "article",
    '[role="main"]',
    ".content",
    ".post-content",
    ".entry-content",
    "main",
    ".main-content",
)


def _normalize_text(text: str) -> str:
    text = re.sub(r"\n{2,}", "\n", text)
    text = re.sub(r"\s{2,}", " ", text)
    return text.strip()


def _truncate(text: str, max_chars: int) -> str:
    if max_chars <= 0 or len(text) <= max_chars:
        return text
    return text[:max_chars]


def _strip_noise(soup: BeautifulSoup, selectors: tuple[str, ...]) -> None:
    for element in soup.select(", ".join(selectors)):
        # Nested matches are already gone with their ancestor.
        if element.decomposed:
            continue
        element.decompose()


def _select_main_text(soup: BeautifulSoup, selectors: tuple[str, ...]) -> str:
    for selector in selectors:
        matches = soup.select(selector)
        if matches:
            return "".join(match.get_text() for match in matches)
    return ""


def extract(
    html: str,
    *,
    max_chars: int | None = None,
    noise_selectors: tuple[str, ...] = NOISE_SELECTORS,
    content_selectors: tuple[str, ...] = CONTENT_SELECTORS,
) -> str:
    """Extract the main readable text of an HTML page.

    Noise subtrees are removed first, then the first matching content region is
    read, falling back to the whole body. Whitespace is collapsed and the result
    is capped at ``max_chars`` (defaults to ``settings.extractor_max_chars``).
    """
    target_chars = (
        max_chars
        if max_chars is not None
        else int(settings.extractor_max_chars)
    )

    soup = BeautifulSoup(html, "html.parser")
    _strip_noise(soup, noise_selectors)

    main_text = _select_main_text(soup, content_selectors)
    if not main_text:
        root = soup.body if soup.body is not None else soup
        main_text = root.get_text()

    return _truncate(_normalize_text(main_text), target_chars)
