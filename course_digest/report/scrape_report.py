# File: course_digest/report/scrape_report.py
"""course_digest.report.scrape_report: summary of a scraping run."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import List, TypedDict


class DocumentInfo(TypedDict):
    """A written year document."""

    degree: str
    year: int
    path: str


class SkippedInfo(TypedDict):
    """Something that could not be scraped and was left out."""

    degree: str
    year: int | None
    url: str
    reason: str


@dataclass(slots=True)
class ScrapeReport:
    """What a run wrote and what it had to skip."""

    degrees: List[str] = field(default_factory=list)
    documents: List[DocumentInfo] = field(default_factory=list)
    skipped: List[SkippedInfo] = field(default_factory=list)
    index_path: str = ""

    def skip(self, degree: str, year: int | None, url: str, reason: object) -> None:
        self.skipped.append({"degree": degree, "year": year, "url": url, "reason": str(reason)})

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the report."""
        return json.dumps(asdict(self), ensure_ascii=False, indent=2 if pretty else None)
