# File: course_digest/utils.py
"""course_digest.utils: academic calendar and degree naming helpers."""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional, Sequence

from course_digest.logger import logger

__all__: Sequence[str] = (
    "SEPTEMBER",
    "current_academic_year",
    "scraped_years",
    "name_to_level",
    "name_and_code_to_slug",
)

SEPTEMBER = 9

# Degrees whose slug on the university website does not follow the usual rule.
_PASCAL_CASE_CODES = frozenset({"9254/000"})  # Computer Science Engineering
_KEBAB_CASE_CODES = frozenset({"9063/000"})  # Artificial Intelligence

_SLUG_NOISE_RE = re.compile(r"( (e|per il|in) )|Magistrale|Master")


def current_academic_year(today: Optional[date] = None) -> int:
    """Solar year in which the running academic year started (September)."""
    today = today or date.today()
    return today.year if today.month >= SEPTEMBER else today.year - 1


def scraped_years(current: int, years_per_degree: int) -> List[int]:
    """Enrollment years worth scraping, oldest first.

    Mostly B.Sc. students applying for a M.Sc. read these documents, so the
    current and the previous academic years are left out.
    """
    previous = current - 1
    return list(range(previous - years_per_degree, previous))


def name_to_level(name: str) -> str:
    """Infer the degree level slug from a human-readable degree name."""
    if "Magistrale" in name or "Master" in name:
        return "magistrale"
    return "laurea"


def name_and_code_to_slug(name: str, code: str) -> str:
    """Infer the slug used by the degree website, with hardcoded exceptions."""
    slug = _SLUG_NOISE_RE.sub("", name).strip()
    if code not in _PASCAL_CASE_CODES:
        slug = slug.lower()
    slug = slug.replace(" ", "-" if code in _KEBAB_CASE_CODES else "")
    logger.debug("Slug for %s (%s): %s", name, code, slug)
    return slug
