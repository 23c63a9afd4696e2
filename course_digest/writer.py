# File: course_digest/writer.py
"""course_digest.writer: writes the scraped degrees and their index to disk.

Failing to read the degree list or to write any document aborts the run;
only scraping failures are tolerated (and recorded in the report).
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from course_digest.config import ScraperConfig, load_predegrees
from course_digest.crawler.fetcher import Fetcher
from course_digest.logger import logger
from course_digest.report.adoc_report import IndexEntry, render_index
from course_digest.report.scrape_report import ScrapeReport
from course_digest.scraper.degrees import Degree, analyze_degree, to_degrees

__all__ = ["INDEX_NAME", "year_filename", "write_folder", "write_year", "write_index_and_degrees"]

INDEX_NAME = "index.adoc"


def year_filename(slug: str, year: int) -> str:
    return f"degree-{slug}-{year}.adoc"


def write_folder(output_dir: Union[str, Path]) -> Path:
    """Create the output folder if it does not exist yet."""
    path = Path(output_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_year(output_dir: Union[str, Path], degree: Degree, year: int, content: str) -> Path:
    """Write the document of *degree* for *year* and return its path."""
    path = Path(output_dir) / year_filename(degree.slug, year)
    path.write_text(content, encoding="utf-8")
    logger.debug("Wrote %s", path)
    return path


async def write_degrees(
    fetcher: Fetcher,
    config: ScraperConfig,
    degrees: List[Degree],
    report: ScrapeReport,
) -> List[IndexEntry]:
    entries: List[IndexEntry] = []
    for degree in degrees:
        report.degrees.append(degree.slug)
        documents = await analyze_degree(fetcher, config, degree, report)
        for year in sorted(documents):
            path = write_year(config.output_dir, degree, year, documents[year])
            report.documents.append({"degree": degree.slug, "year": year, "path": str(path)})
            entries.append((degree.name, degree.slug, year))
    return entries


async def write_index_and_degrees(
    config: ScraperConfig,
    fetcher: Optional[Fetcher] = None,
    current_year: Optional[int] = None,
) -> ScrapeReport:
    """Scrape every configured degree, write its documents and ``index.adoc``."""
    predegrees = load_predegrees(config.degrees_path)
    output_dir = write_folder(config.output_dir)
    report = ScrapeReport()

    async def _run(f: Fetcher) -> List[IndexEntry]:
        degrees = await to_degrees(f, config, predegrees, current_year)
        return await write_degrees(f, config, degrees, report)

    if fetcher is None:
        async with Fetcher(config) as own_fetcher:
            entries = await _run(own_fetcher)
    else:
        entries = await _run(fetcher)

    index_path = output_dir / INDEX_NAME
    index_path.write_text(
        render_index(config.index_title, config.documentation_url, entries), encoding="utf-8"
    )
    report.index_path = str(index_path)
    logger.info(
        "Wrote %d documents for %d degrees (%d items skipped)",
        len(report.documents),
        len(report.degrees),
        len(report.skipped),
    )
    return report
