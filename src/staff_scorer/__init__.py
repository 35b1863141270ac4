"""staff-scorer: Employee performance and warning-penalty scoring."""

__version__ = "0.1.0"

import os
import pathlib

DEFAULT_DATASET_PATH = os.path.join("data", "staff_dataset.json")

PACKAGE_DIR = pathlib.Path(__file__).parent
