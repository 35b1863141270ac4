"""pypyr step: load the scoring dataset.

Reads ``dataset_path`` from the pypyr context (falling back to the
``STAFF_SCORER_DATASET`` env var, then ``./data/staff_dataset.json``),
loads and validates the JSON dataset, and stores it back into the
context for downstream steps.

Usage in a pipeline YAML::

    steps:
      - name: staff_scorer.steps.load_dataset

Context keys consumed:
    dataset_path (str, optional): Path to the dataset JSON file.

Context keys produced:
    dataset (dict): The parsed dataset.
    dataset_path (str): The resolved path.
"""

import logging
import os

from staff_scorer import DEFAULT_DATASET_PATH
from staff_scorer.data.loader import load_dataset

logger = logging.getLogger(__name__)


def run_step(context: dict) -> None:
    """pypyr entry-point: load the dataset into the context.

    Args:
        context: The mutable pypyr context dictionary.
    """
    dataset_path: str = context.get("dataset_path") or os.environ.get(
        "STAFF_SCORER_DATASET", DEFAULT_DATASET_PATH
    )

    context["dataset"] = load_dataset(dataset_path)
    context["dataset_path"] = dataset_path

    logger.info("Dataset loaded from %s", dataset_path)
