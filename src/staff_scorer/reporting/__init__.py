"""Reporting sub-package for the staff-scorer project.

Exports the report composer::

    from staff_scorer.reporting import compose_location_report

    report = compose_location_report(scores, "2024-03-01", "2024-03-31")
    pathlib.Path("report.html").write_text(report["html_body"])
"""

from staff_scorer.reporting.composer import compose_location_report

__all__ = ["compose_location_report"]
