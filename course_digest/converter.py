# File: course_digest/converter.py
"""course_digest.converter: HTML and PDF generation with Asciidoctor.

Both tools receive the ``*.adoc`` glob and resolve it themselves, exactly as
they are called from the build container.
"""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Union

from course_digest.logger import logger

__all__ = [
    "ConversionError",
    "ConversionResult",
    "ADOC_GLOB",
    "collect_sources",
    "run_tool",
    "convert_documents",
]

ADOC_GLOB = "*.adoc"
HTML_TOOL = "asciidoctor"
PDF_TOOL = "asciidoctor-pdf"


class ConversionError(RuntimeError):
    """An Asciidoctor run could not be started or exited with an error."""


@dataclass(slots=True)
class ConversionResult:
    sources: List[Path] = field(default_factory=list)
    html: List[Path] = field(default_factory=list)
    pdf: List[Path] = field(default_factory=list)


def collect_sources(source: Union[str, Path], directory: Union[str, Path]) -> List[Path]:
    """Copy only the ``*.adoc`` documents of *source* into an emptied *directory*."""
    src = Path(source)
    dst = Path(directory)
    if not src.is_dir():
        raise ConversionError(f"Source directory not found: {src}")
    if src.resolve() == dst.resolve():
        raise ConversionError("Conversion directory must differ from the source directory")
    if dst.exists():
        shutil.rmtree(dst)
    dst.mkdir(parents=True)
    copied = [Path(shutil.copy2(p, dst / p.name)) for p in sorted(src.glob(ADOC_GLOB)) if p.is_file()]
    logger.info("Collected %d documents from %s into %s", len(copied), src, dst)
    return copied


async def run_tool(tool: str, args: Sequence[str], cwd: Path) -> None:
    """Run *tool* in *cwd*; raise ConversionError unless it exits with 0."""
    executable = shutil.which(tool)
    if executable is None:
        raise ConversionError(f"{tool} not found on PATH")
    logger.info("Running %s %s in %s", tool, " ".join(args), cwd)
    proc = await asyncio.create_subprocess_exec(
        executable,
        *args,
        cwd=str(cwd),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    for line in stdout.decode(errors="replace").splitlines():
        logger.debug("%s: %s", tool, line)
    if proc.returncode != 0:
        raise ConversionError(
            f"{tool} exited with {proc.returncode}: {stderr.decode(errors='replace').strip()}"
        )
    for line in stderr.decode(errors="replace").splitlines():
        logger.warning("%s: %s", tool, line)


async def convert_documents(
    directory: Union[str, Path], *, html: bool = True, pdf: bool = True
) -> ConversionResult:
    """Convert every ``.adoc`` document in *directory* next to its source."""
    root = Path(directory)
    sources = sorted(root.glob(ADOC_GLOB))
    if not sources:
        raise ConversionError(f"No {ADOC_GLOB} documents in {root}")
    result = ConversionResult(sources=sources)
    if html:
        await run_tool(HTML_TOOL, [ADOC_GLOB], root)
        result.html = [src.with_suffix(".html") for src in sources]
    if pdf:
        await run_tool(PDF_TOOL, [ADOC_GLOB], root)
        result.pdf = [src.with_suffix(".pdf") for src in sources]
    logger.info(
        "Converted %d documents (%d HTML, %d PDF)", len(sources), len(result.html), len(result.pdf)
    )
    return result
