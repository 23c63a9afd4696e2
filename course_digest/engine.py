# File: course_digest/engine.py
"""course_digest.engine: the scraper -> asciidoc -> pages pipeline.

Each stage reads the directory written by the previous one (the artifact
handed between CI jobs). Stages run strictly in order and the first failure
stops the pipeline: later stages never see a partial artifact.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from course_digest.config import ScraperConfig
from course_digest.converter import collect_sources, convert_documents
from course_digest.logger import logger
from course_digest.report.scrape_report import ScrapeReport
from course_digest.site import build_site
from course_digest.writer import write_index_and_degrees

__all__ = ["STAGES", "Artifacts", "PipelineResult", "Engine", "select_stages", "run_pipeline"]

STAGES: Sequence[str] = ("scraper", "asciidoc", "pages")


@dataclass(slots=True)
class Artifacts:
    """Directories handed from one stage to the next."""

    courses: Path
    build: Path
    site: Path


@dataclass(slots=True)
class PipelineResult:
    completed: List[str] = field(default_factory=list)
    report: Optional[ScrapeReport] = None
    site_files: List[Path] = field(default_factory=list)


def select_stages(stages: Optional[Iterable[str]]) -> List[str]:
    """Validate *stages* and return them in pipeline order."""
    if stages is None:
        return list(STAGES)
    wanted = list(dict.fromkeys(stages))
    unknown = [s for s in wanted if s not in STAGES]
    if unknown:
        raise ValueError(f"Unknown stage(s): {', '.join(unknown)}; expected {', '.join(STAGES)}")
    return [s for s in STAGES if s in wanted]


async def run_pipeline(
    config: ScraperConfig,
    stages: Optional[Iterable[str]] = None,
    site_dir: Union[str, Path] = "site",
    build_dir: Union[str, Path] = "build",
    *,
    html: bool = True,
    pdf: bool = True,
) -> PipelineResult:
    """Run the selected stages of the pipeline, in order.

    The ``asciidoc`` stage converts copies of the ``*.adoc`` documents in
    *build_dir*, the ``pages`` stage publishes *build_dir* as *site_dir*.
    """
    artifacts = Artifacts(courses=Path(config.output_dir), build=Path(build_dir), site=Path(site_dir))
    result = PipelineResult()
    for stage in select_stages(stages):
        logger.info("Stage %s started", stage)
        if stage == "scraper":
            result.report = await write_index_and_degrees(config)
        elif stage == "asciidoc":
            collect_sources(artifacts.courses, artifacts.build)
            await convert_documents(artifacts.build, html=html, pdf=pdf)
        else:
            result.site_files = build_site(artifacts.build, artifacts.site)
        result.completed.append(stage)
        logger.info("Stage %s completed", stage)
    return result


class Engine:
    """Facade for the CLI and tests: configuration plus pipeline runs."""

    def __init__(self, config: ScraperConfig) -> None:
        self.config = config

    def run(
        self,
        stages: Optional[Iterable[str]] = None,
        site_dir: Union[str, Path] = "site",
        build_dir: Union[str, Path] = "build",
    ) -> PipelineResult:
        """Run the pipeline synchronously; any stage error is logged and re-raised."""
        try:
            return asyncio.run(run_pipeline(self.config, stages, site_dir, build_dir))
        except Exception as exc:
            logger.error("Pipeline failed: %s", exc)
            raise

    def summary(self, result: PipelineResult) -> Dict[str, object]:
        return {
            "stages": result.completed,
            "documents": len(result.report.documents) if result.report else 0,
            "site_files": len(result.site_files),
        }
