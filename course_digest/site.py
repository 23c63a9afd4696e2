# File: course_digest/site.py
"""course_digest.site: assembles the static site directory.

The whole conversion directory is published: the AsciiDoc sources are
linked from the pages next to the generated HTML and PDF files.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Union

from course_digest.logger import logger

__all__ = ["SiteError", "build_site"]


class SiteError(RuntimeError):
    """The site directory cannot be assembled."""


def build_site(source: Union[str, Path], site_dir: Union[str, Path]) -> List[Path]:
    """Replace *site_dir* with a copy of *source* and return the copied files."""
    src = Path(source)
    dst = Path(site_dir)
    if not src.is_dir():
        raise SiteError(f"Source directory not found: {src}")
    if src.resolve() == dst.resolve():
        raise SiteError("Site directory must differ from the source directory")
    if dst.exists():
        shutil.rmtree(dst)
    shutil.copytree(src, dst)
    files = sorted(p for p in dst.rglob("*") if p.is_file())
    if not (dst / "index.html").is_file():
        logger.warning("No index.html in %s, the site root will be empty", dst)
    logger.info("Site ready in %s (%d files)", dst, len(files))
    return files
