# === FILE: course_digest/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of course_digest.

Commands:
  scrape    Scrape the configured degrees into output/*.adoc
  convert   Copy the .adoc documents into build/ and convert them to HTML and PDF
  site      Replace the static site directory with build/
  run       Run the whole pipeline (scraper -> asciidoc -> pages)
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --output DIR        Directory of the .adoc documents (override output_dir)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...); default from COURSE_DIGEST_LOG
  --log-file PATH     Also log to this file
  --log-format FORMAT Logging format string

Example:
  course-digest --config configs/default.yaml scrape --report output/report.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from course_digest import __version__
from course_digest.config import load_config
from course_digest.converter import collect_sources, convert_documents
from course_digest.engine import STAGES, Engine
from course_digest.logger import init_logging
from course_digest.report.json_report import render_json
from course_digest.site import build_site
from course_digest.writer import write_index_and_degrees

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])
_LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='course_digest, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='YAML or JSON configuration file.'
)
@click.option(
    '--output', '-o', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory of the .adoc documents (override output_dir).'
)
@click.option(
    '--log-level', 'log_level',
    default=None,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    help='Logging level (default: $COURSE_DIGEST_LOG or INFO).'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stderr only if omitted).'
)
@click.option(
    '--log-format', 'log_format',
    default=_LOG_FORMAT,
    show_default=True,
    help='Logging format string.'
)
@click.pass_context
def cli(ctx, config_path, output_dir, log_level, log_file, log_format):
    """course_digest: merged course descriptions as AsciiDoc, HTML and PDF."""
    init_logging(
        level=log_level.upper() if log_level else None,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Cannot load configuration: {e}')
    if output_dir is not None:
        cfg = cfg.model_copy(update={'output_dir': output_dir})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('scrape', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--report', '-r', 'report_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON run report to this file.'
)
@click.option('--pretty', is_flag=True, help='Indent the JSON printed on stdout.')
@click.pass_context
def scrape(ctx, report_output, pretty):
    """Scrape every configured degree and write the .adoc documents."""
    cfg = ctx.obj['config']
    try:
        report = asyncio.run(write_index_and_degrees(cfg))
    except Exception as e:
        print_error(f'Scraping failed: {e}')

    if report_output:
        try:
            saved = render_json(report, report_output)
            click.echo(f'JSON report: {saved}')
        except Exception as e:
            print_error(f'Cannot save JSON report: {e}')
        return
    click.echo(report.json(pretty=pretty))


_BUILD_OPTION = click.option(
    '--build', '-b', 'build_dir',
    default='build',
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help='Conversion directory (receives copies of the .adoc documents).'
)


@cli.command('convert', context_settings=CONTEXT_SETTINGS)
@_BUILD_OPTION
@click.option('--html/--no-html', default=True, show_default=True, help='Generate HTML.')
@click.option('--pdf/--no-pdf', default=True, show_default=True, help='Generate PDF.')
@click.pass_context
def convert(ctx, build_dir, html, pdf):
    """Copy the .adoc documents into the build directory and convert them."""
    cfg = ctx.obj['config']
    try:
        collect_sources(cfg.output_dir, build_dir)
        result = asyncio.run(convert_documents(build_dir, html=html, pdf=pdf))
    except Exception as e:
        print_error(f'Conversion failed: {e}')
    click.echo(f'Converted {len(result.sources)} documents in {build_dir}')


@cli.command('site', context_settings=CONTEXT_SETTINGS)
@_BUILD_OPTION
@click.option(
    '--out', 'site_dir',
    default='site',
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help='Site directory to publish.'
)
@click.pass_context
def site(ctx, build_dir, site_dir):
    """Replace the site directory with the converted documents."""
    try:
        files = build_site(build_dir, site_dir)
    except Exception as e:
        print_error(f'Cannot build site: {e}')
    click.echo(f'Site: {site_dir} ({len(files)} files)')


@cli.command('run', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--stage', 'stages',
    multiple=True,
    type=click.Choice(list(STAGES)),
    help='Stage to run (repeatable, default: all, always in pipeline order).'
)
@_BUILD_OPTION
@click.option(
    '--out', 'site_dir',
    default='site',
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help='Site directory to publish.'
)
@click.pass_context
def run(ctx, stages, build_dir, site_dir):
    """Run the scraper -> asciidoc -> pages pipeline."""
    engine = Engine(ctx.obj['config'])
    try:
        result = engine.run(stages or None, site_dir, build_dir)
    except Exception as e:
        print_error(f'Pipeline failed: {e}')
    click.echo(json.dumps(engine.summary(result), ensure_ascii=False))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
