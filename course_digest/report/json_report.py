# course_digest/report/json_report.py

"""
JSON report of a course_digest run.

Serializes a ScrapeReport to a file.
"""
from pathlib import Path

from course_digest.report.scrape_report import ScrapeReport


def render_json(report: ScrapeReport, output_path: Path | str) -> Path:
    """
    Save *report* as JSON at *output_path*.

    :param report: ScrapeReport of a finished run
    :param output_path: path of the JSON file
    :return: Path of the saved file

    Example:
    ```python
    from course_digest.report.json_report import render_json
    report_path = render_json(report, 'output/report.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report.json(pretty=True), encoding="utf-8")
    return output
