"""pypyr step: render the HTML location performance report.

Context keys consumed:
    scored_employees (list[dict]): Output of ``score_employees``.
    window_start / window_end (str): The reporting window.
    report_path (str, optional): Where to write the HTML file.

Context keys produced:
    report (dict): The composed report with keys ``subject``,
        ``html_body``, ``location_count``, ``employee_count``.
"""

import logging
import pathlib

from staff_scorer.reporting.composer import compose_location_report

logger = logging.getLogger(__name__)


def run_step(context: dict) -> None:
    """pypyr entry-point: compose the report and optionally write it out.

    Args:
        context: The mutable pypyr context dictionary.
    """
    report = compose_location_report(
        context["scored_employees"],
        context["window_start"],
        context["window_end"],
    )
    context["report"] = report

    report_path = context.get("report_path")
    if report_path:
        path = pathlib.Path(report_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(report["html_body"], encoding="utf-8")
        logger.info("Report written to %s", path)

    logger.info(
        "Location report generated: %d employees, %d locations",
        report["employee_count"],
        report["location_count"],
    )
