"""course_digest.report.adoc_report: AsciiDoc rendering with Jinja2."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from jinja2 import Environment, FileSystemLoader, PackageLoader, StrictUndefined

from course_digest.scraper.teachings import Teaching

__all__ = (
    "IndexEntry",
    "MISSING_TRANSLATIONS",
    "apply_translations",
    "get_environment",
    "render_teaching",
    "render_year",
    "render_index",
)

# Italian leftovers on English teaching pages, plus the description headings
# promoted to AsciiDoc subsections. Applied in order.
MISSING_TRANSLATIONS: Sequence[Tuple[str, str]] = (
    ("BASI DI DATI", "DATABASES"),
    ("INTRODUZIONE ALL'APPRENDIMENTO AUTOMATICO", "Introduction to machine learning"),
    ("FONDAMENTI DI", ""),
    ("Learning outcomes", "=== Learning outcomes"),
    ("Teaching contents", "=== Teaching contents"),
)

IndexEntry = Tuple[str, str, int]  # (degree name, degree slug, year)


@lru_cache(maxsize=None)
def _environment(template_dir: Optional[str]) -> Environment:
    loader = (
        FileSystemLoader(template_dir)
        if template_dir is not None
        else PackageLoader("course_digest", "templates")
    )
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def get_environment(template_dir: Union[str, Path, None] = None) -> Environment:
    """Jinja2 environment over the packaged templates or over *template_dir*."""
    return _environment(str(template_dir) if template_dir is not None else None)


def apply_translations(text: str) -> str:
    for find, replace in MISSING_TRANSLATIONS:
        text = text.replace(find, replace)
    return text


def render_teaching(teaching: Teaching, template_dir: Union[str, Path, None] = None) -> str:
    """Render one teaching as a level-1 section."""
    template = get_environment(template_dir).get_template("teaching.adoc.j2")
    return apply_translations(template.render(teaching=teaching).strip())


def render_year(
    degree_name: str,
    year: int,
    sections: Iterable[str],
    template_dir: Union[str, Path, None] = None,
) -> str:
    """Render the document of one degree for students enrolled in *year*."""
    template = get_environment(template_dir).get_template("year.adoc.j2")
    return template.render(degree_name=degree_name, year=year, sections=list(sections))


def render_index(
    title: str,
    documentation_url: str,
    entries: Iterable[IndexEntry],
    template_dir: Union[str, Path, None] = None,
) -> str:
    """Render ``index.adoc`` linking every written year document.

    Example:
    ```python
    render_index("Courses", "", [("Informatica", "informatica", 2021)])
    ```
    """
    rows: List[dict] = [
        {"name": name, "slug": slug, "year": year} for name, slug, year in entries
    ]
    template = get_environment(template_dir).get_template("index.adoc.j2")
    return template.render(title=title, documentation_url=documentation_url, entries=rows)
