# File: course_digest/report/__init__.py
"""course_digest.report: AsciiDoc documents and run reports used by the CLI and tests."""

from __future__ import annotations

from course_digest.report.adoc_report import render_index, render_teaching, render_year
from course_digest.report.json_report import render_json
from course_digest.report.scrape_report import ScrapeReport

__all__ = ["ScrapeReport", "render_index", "render_json", "render_teaching", "render_year"]
