"""Dataset loader for the staff-scorer project.

Reads the JSON document handed over by the external data layer and
normalises it into a dict of record lists.  This is the only module in
the project that performs I/O.
"""

import json
import logging
import pathlib

logger = logging.getLogger(__name__)

SECTIONS: list[str] = [
    "employees",
    "locations",
    "shifts",
    "attendance_logs",
    "tasks",
    "task_completions",
    "test_submissions",
    "reviews",
    "warnings",
]


class DatasetError(ValueError):
    """Raised when a dataset file is missing, unreadable or malformed."""


def parse_dataset(document) -> dict:
    """Validate a decoded JSON document and return a normalised dataset.

    Missing sections become empty lists; unknown top-level keys are
    ignored.

    Args:
        document: The decoded JSON value.

    Returns:
        A dict with one list per entry of :data:`SECTIONS`.

    Raises:
        DatasetError: If *document* is not an object, a section is not a
            list, or a record is not an object.
    """
    if not isinstance(document, dict):
        raise DatasetError("Dataset must be a JSON object")

    dataset: dict = {}
    for section in SECTIONS:
        records = document.get(section)
        if records is None:
            records = []
        if not isinstance(records, list):
            raise DatasetError(f"Section '{section}' must be a list")
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise DatasetError(
                    f"Record {index} in section '{section}' must be an object"
                )
        dataset[section] = records

    logger.debug(
        "Parsed dataset: %s",
        ", ".join(f"{s}={len(dataset[s])}" for s in SECTIONS),
    )
    return dataset


def load_dataset(path) -> dict:
    """Read and parse the dataset file at *path*.

    Raises:
        DatasetError: If the file cannot be read or decoded, or its
            content is malformed.
    """
    dataset_path = pathlib.Path(path)
    try:
        text = dataset_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DatasetError(f"Cannot read dataset {dataset_path}: {exc}") from exc

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DatasetError(f"Invalid JSON in {dataset_path}: {exc}") from exc

    dataset = parse_dataset(document)
    logger.info(
        "Loaded dataset from %s (%d employees, %d warnings)",
        dataset_path, len(dataset["employees"]), len(dataset["warnings"]),
    )
    return dataset


def active_employees(dataset: dict, location_id=None) -> list[dict]:
    """Return active employees, optionally restricted to one location.

    Employees without a ``status`` are treated as active.
    """
    employees = []
    for employee in dataset.get("employees", []):
        if employee.get("status", "active") != "active":
            continue
        if location_id is not None and employee.get("location_id") != location_id:
            continue
        employees.append(employee)
    return employees
