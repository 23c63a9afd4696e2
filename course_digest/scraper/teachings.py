# File: course_digest/scraper/teachings.py
"""Scraping of a single teaching page.

A course listed on a degree structure page links to the Italian teaching
page. The English version is reached through the language switcher, and its
``description-text`` block is trimmed down to the part between
"Learning outcomes" and the first end marker.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from course_digest.crawler.fetcher import Fetcher
from course_digest.logger import logger

__all__ = (
    "Teaching",
    "TeachingPageError",
    "DESCRIPTION_START",
    "DESCRIPTION_END_MARKERS",
    "DEFAULT_END_MARKER",
    "extract_english_url",
    "parse_teaching_page",
    "extract_description",
    "scrape_teaching",
)

DESCRIPTION_START = "Learning outcomes"

# Teachings whose page has no "Readings" section, keyed by a title fragment.
DESCRIPTION_END_MARKERS: Dict[str, str] = {
    "Numerical Computing": "Teaching",
    "History of Informatics": "Office",
}
DEFAULT_END_MARKER = "Readings"

_TITLE_SELECTOR = "div#u-content-intro > h1"
_LANG_SELECTOR = "li.language-en"
_DESC_SELECTOR = "div.description-text"
_HREF_RE = re.compile(r"http[^\"]*")


class TeachingPageError(Exception):
    """The teaching page does not have the expected structure."""


@dataclass(slots=True)
class Teaching:
    """English description of a teaching, ready to be rendered."""

    url: str
    title: str
    description: str
    degree_slug: str
    year: int


def extract_english_url(html: str) -> str:
    """Return the target of the English language switcher link."""
    soup = BeautifulSoup(html, "html.parser")
    item = soup.select_one(_LANG_SELECTOR)
    if item is None:
        raise TeachingPageError("Cannot get english url")
    link = item.find("a", href=True)
    if link is not None:
        return str(link["href"]).strip()
    # Some pages put the URL in the item text instead of a proper anchor
    match = _HREF_RE.search(item.decode_contents())
    return match.group(0) if match else ""


def parse_teaching_page(html: str) -> Tuple[str, str]:
    """Return ``(title, full_description)`` of an English teaching page."""
    soup = BeautifulSoup(html, "html.parser")
    title = soup.select_one(_TITLE_SELECTOR)
    if title is None:
        raise TeachingPageError("Cannot parse teaching title")
    description = soup.select_one(_DESC_SELECTOR)
    if description is None:
        raise TeachingPageError("Cannot parse teaching description")
    # the title becomes a section heading and must stay on one line
    return " ".join(title.get_text().split()), description.get_text()


def _find_end(title: str, full_description: str) -> Optional[int]:
    for pattern, marker in DESCRIPTION_END_MARKERS.items():
        if pattern in title:
            index = full_description.find(marker)
            return len(full_description) if index < 0 else index
    index = full_description.find(DEFAULT_END_MARKER)
    return None if index < 0 else index


def extract_description(title: str, full_description: str) -> str:
    """Keep the learning outcomes and contents, one paragraph per line."""
    start = full_description.find(DESCRIPTION_START)
    if start < 0:
        start = len(full_description)
    end = _find_end(title, full_description)
    if end is None:
        raise TeachingPageError("No description end marker defined for this page content")
    # the two characters before the marker belong to its heading markup
    excerpt = full_description[start:max(end - 2, 0)]
    lines = (line.strip() for line in excerpt.split("\n"))
    return "\n\n".join(line for line in lines if line).strip()


async def scrape_teaching(fetcher: Fetcher, url: str, degree_slug: str, year: int) -> Teaching:
    """Fetch the teaching at *url* (Italian page) and its English version."""
    english_url = ""
    if url:
        english_url = extract_english_url(await fetcher.get_text(url))
    if not english_url:
        raise TeachingPageError(f"No english page linked from {url!r}")
    english_url = urljoin(url, english_url)
    logger.debug("English page: %s", english_url)
    title, full_description = parse_teaching_page(await fetcher.get_text(english_url))
    return Teaching(
        url=english_url,
        title=title,
        description=extract_description(title, full_description),
        degree_slug=degree_slug,
        year=year,
    )
