# File: course_digest/scraper/degrees.py
"""Degrees and their yearly programme pages.

A :class:`~course_digest.config.Predegree` only knows the name and code of a
degree. The URLs of the programme descriptions change every year and are
collected here by scraping, before each programme page is turned into an
AsciiDoc document.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from course_digest.config import Predegree, ScraperConfig
from course_digest.crawler.fetcher import FetchError, Fetcher
from course_digest.logger import logger
from course_digest.report.adoc_report import render_teaching, render_year
from course_digest.report.scrape_report import ScrapeReport
from course_digest.scraper.teachings import TeachingPageError, scrape_teaching
from course_digest.utils import (
    current_academic_year,
    name_and_code_to_slug,
    name_to_level,
    scraped_years,
)

__all__ = (
    "Degree",
    "structure_url",
    "get_degree_structure_urls",
    "parse_degree",
    "to_degrees",
    "analyze_year",
    "analyze_degree",
)

_COURSE_SELECTOR = "td.title"
_FIRST_LINK_SELECTOR = ".no-bullet > li:first-child > a"


@dataclass(slots=True)
class Degree:
    """Degree metadata needed for scraping, partly refreshed every year."""

    name: str
    slug: str
    # solar year in which the academic year started -> programme description URL
    year_urls: Dict[int, str] = field(default_factory=dict)


def structure_url(base_url: str, level: str, slug: str, year: int) -> str:
    return f"{base_url}/{level}/{slug}/insegnamenti?year={year}"


def first_structure_link(html: str, page_url: str) -> Optional[str]:
    """Absolute URL of the first programme link on a degree's teachings page."""
    soup = BeautifulSoup(html, "html.parser")
    link = soup.select_one(_FIRST_LINK_SELECTOR)
    if link is None or not link.get("href"):
        return None
    return urljoin(page_url, str(link["href"]))


async def get_degree_structure_urls(
    fetcher: Fetcher,
    config: ScraperConfig,
    level: str,
    slug: str,
    current_year: Optional[int] = None,
) -> Dict[int, str]:
    """Collect the programme URL of every scraped enrollment year.

    Years whose URL cannot be collected are left out of the result.
    """
    current = current_year if current_year is not None else current_academic_year()
    year_urls: Dict[int, str] = {}
    for year in scraped_years(current, config.years_per_degree):
        url = structure_url(config.base_url, level, slug, year)
        logger.info("Visiting: %s", url)
        try:
            html = await fetcher.get_text(url)
        except FetchError as exc:
            logger.warning("Skipping %s: %s", url, exc)
            continue
        href = first_structure_link(html, url)
        if href is None:
            logger.warning("No programme link on %s", url)
            continue
        logger.info("Got link: %s", href)
        year_urls[year] = href
    return year_urls


async def parse_degree(
    fetcher: Fetcher,
    config: ScraperConfig,
    predegree: Predegree,
    current_year: Optional[int] = None,
) -> Optional[Degree]:
    """Turn a predegree into a degree, or None if any of its fields is empty."""
    if not (predegree.name and predegree.id and predegree.code):
        logger.warning("Incomplete degree entry skipped: %r", predegree)
        return None
    level = name_to_level(predegree.name)
    site_slug = name_and_code_to_slug(predegree.name, predegree.code)
    return Degree(
        name=predegree.name,
        slug=predegree.id,
        year_urls=await get_degree_structure_urls(fetcher, config, level, site_slug, current_year),
    )


async def to_degrees(
    fetcher: Fetcher,
    config: ScraperConfig,
    predegrees: Iterable[Predegree],
    current_year: Optional[int] = None,
) -> List[Degree]:
    """Convert every predegree; failed conversions are dropped."""
    degrees: List[Degree] = []
    for predegree in predegrees:
        degree = await parse_degree(fetcher, config, predegree, current_year)
        if degree is not None:
            degrees.append(degree)
    return degrees


def _course_cells(html: str) -> List[Tuple[str, Optional[str]]]:
    """``(name, href)`` of every course listed on a programme page."""
    soup = BeautifulSoup(html, "html.parser")
    cells: List[Tuple[str, Optional[str]]] = []
    for cell in soup.select(_COURSE_SELECTOR):
        link = cell.find("a", href=True, recursive=False)
        href = str(link["href"]) if isinstance(link, Tag) else None
        cells.append((cell.get_text().strip(), href))
    return cells


async def analyze_year(
    fetcher: Fetcher,
    config: ScraperConfig,
    degree: Degree,
    year: int,
    url: str,
    report: Optional[ScrapeReport] = None,
) -> Optional[str]:
    """Scrape one programme page into the AsciiDoc document of that year.

    Returns None when the programme page itself cannot be fetched. Courses
    whose teaching page cannot be scraped are logged and left out.
    """
    logger.info("Analysing %s link: %s", year, url)
    try:
        page = await fetcher.fetch(url)
    except FetchError as exc:
        logger.error("%s", exc)
        if report is not None:
            report.skip(degree.slug, year, url, exc)
        return None

    semaphore = asyncio.Semaphore(config.concurrency)

    async def render_course(name: str, href: Optional[str]) -> Optional[str]:
        logger.info("Visiting %s", name)
        if not href:
            logger.warning("Missing link: %s", name)
            if report is not None:
                report.skip(degree.slug, year, url, f"Missing link: {name}")
            return None
        teaching_url = urljoin(page.url, href)
        async with semaphore:
            try:
                teaching = await scrape_teaching(fetcher, teaching_url, degree.slug, year)
            except (FetchError, TeachingPageError) as exc:
                logger.warning("Cannot get description of %s: %s", name, exc)
                if report is not None:
                    report.skip(degree.slug, year, teaching_url, exc)
                return None
        return render_teaching(teaching)

    rendered = await asyncio.gather(*(render_course(n, h) for n, h in _course_cells(page.content)))
    sections = [section for section in rendered if section is not None]
    logger.info("%s (%s): %d teachings", degree.name, year, len(sections))
    return render_year(degree.name, year, sections)


async def analyze_degree(
    fetcher: Fetcher,
    config: ScraperConfig,
    degree: Degree,
    report: Optional[ScrapeReport] = None,
) -> Dict[int, str]:
    """Scrape every yearly programme of *degree*: ``{year: document}``."""
    documents: Dict[int, str] = {}
    for year, url in sorted(degree.year_urls.items()):
        document = await analyze_year(fetcher, config, degree, year, url, report)
        if document is not None:
            documents[year] = document
    return documents
