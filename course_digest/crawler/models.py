# course_digest/crawler/models.py
"""
Data models for the course_digest crawler.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class PageData:
    """Final URL (after redirects) and decoded body of a fetched page."""

    url: str
    content: str
