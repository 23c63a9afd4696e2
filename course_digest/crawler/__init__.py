"""course_digest.crawler: HTTP access to the degree websites."""

from course_digest.crawler.fetcher import FetchError, Fetcher
from course_digest.crawler.models import PageData

__all__ = ["FetchError", "Fetcher", "PageData"]
