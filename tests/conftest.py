# File: tests/conftest.py
import json
import os
import stat
import sys
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Dict

import pytest
import pytest_asyncio
from aiohttp import web

from course_digest.config import ScraperConfig

#: academic year pinned by the scraping tests; years 2020-2022 are scraped
CURRENT_YEAR = 2024
#: year whose teachings page answers 404 on the fake degree site
MISSING_YEAR = 2020

DESCRIPTION = (
    "\nLearning outcomes\n  At the end of the course students know SQL.\n\n"
    "Teaching contents\n   Relational model.\n\n Normal forms.\n\n"
    "Readings/Bibliography\n  Some book."
)


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


@pytest.fixture()
def degrees_file(tmp_path) -> Path:
    """
    Degree list with one real degree and one incomplete entry.
    """
    path = tmp_path / "degrees.json"
    path.write_text(
        json.dumps(
            [
                {"id": "informatica", "name": "Informatica", "code": "8009/000"},
                {"id": "", "name": "Broken", "code": "0000/000"},
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def basic_config(tmp_path, degrees_file) -> ScraperConfig:
    """
    Return a basic valid ScraperConfig writing into a temporary directory.
    """
    return ScraperConfig(
        base_url="http://example.com",
        degrees_path=degrees_file,
        output_dir=tmp_path / "output",
        timeout=2.0,
        user_agent="TestAgent/1.0",
        rate_limit=100.0,
        retry_times=0,
        backoff=0.0,
    )


def _teaching_pages(origin: str) -> Dict[str, Dict[str, str]]:
    return {
        "1": {
            "it": f'<ul><li class="language-en"><a href="{origin}/en/teaching/1">English</a></li></ul>',
            "en": (
                '<div id="u-content-intro"><h1>BASI DI DATI</h1></div>'
                f'<div class="description-text">{DESCRIPTION}</div>'
            ),
        },
        "2": {
            "it": '<ul><li class="language-en"><a href="/en/teaching/2">English</a></li></ul>',
            "en": '<div id="u-content-intro"><h1>Algorithms</h1></div><p>nothing here</p>',
        },
    }


def build_degree_site() -> web.Application:
    """Minimal imitation of the degree websites."""
    app = web.Application()

    async def teachings(request: web.Request) -> web.Response:
        year = int(request.query["year"])
        if year == MISSING_YEAR:
            raise web.HTTPNotFound()
        return web.Response(
            text=(
                '<ul class="no-bullet">'
                f'<li><a href="/laurea/informatica/programme/{year}">Plan {year}</a></li>'
                '<li><a href="/elsewhere">Other</a></li></ul>'
            ),
            content_type="text/html",
        )

    async def programme(request: web.Request) -> web.Response:
        return web.Response(
            text=(
                "<table>"
                '<tr><td class="title"><a href="/it/teaching/1">BASI DI DATI</a></td></tr>'
                '<tr><td class="title">  Tirocinio  </td></tr>'
                '<tr><td class="title"><a href="/it/teaching/2">ALGORITMI</a></td></tr>'
                "</table>"
            ),
            content_type="text/html",
        )

    async def teaching(request: web.Request) -> web.Response:
        pages = _teaching_pages(str(request.url.origin()))
        page = pages.get(request.match_info["num"])
        if page is None:
            raise web.HTTPNotFound()
        return web.Response(text=page[request.match_info["lang"]], content_type="text/html")

    app.router.add_get("/laurea/informatica/insegnamenti", teachings)
    app.router.add_get("/laurea/informatica/programme/{year}", programme)
    app.router.add_get("/{lang}/teaching/{num}", teaching)
    return app


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def degree_site(unused_tcp_port: int) -> AsyncIterator[str]:
    async for url in serve_app(build_degree_site(), unused_tcp_port):
        yield url


@pytest.fixture()
def site_config(basic_config: ScraperConfig, degree_site: str) -> ScraperConfig:
    return basic_config.model_copy(update={"base_url": degree_site})


def _write_tool(bin_dir: Path, name: str, body: str) -> None:
    tool = bin_dir / name
    tool.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    tool.chmod(tool.stat().st_mode | stat.S_IEXEC)


@pytest.fixture()
def fake_asciidoctor(tmp_path, monkeypatch) -> Path:
    """
    Put shell stand-ins for asciidoctor and asciidoctor-pdf first on PATH.
    """
    if sys.platform.startswith("win"):
        pytest.skip("shell scripts required")
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    _write_tool(bin_dir, "asciidoctor", 'for f in *.adoc; do touch "${f%.adoc}.html"; done\n')
    _write_tool(bin_dir, "asciidoctor-pdf", 'for f in *.adoc; do touch "${f%.adoc}.pdf"; done\n')
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    return bin_dir


@pytest.fixture()
def failing_asciidoctor_pdf(fake_asciidoctor) -> Path:
    _write_tool(fake_asciidoctor, "asciidoctor-pdf", 'echo "font missing" >&2\nexit 3\n')
    return fake_asciidoctor
