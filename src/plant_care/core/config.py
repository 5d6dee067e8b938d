from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from platformdirs import user_data_dir

load_dotenv()

APP_NAME = "Plant Care"
APP_AUTHOR = "PlantCare"
DATA_DIR = Path(os.getenv("PLANT_CARE_DATA_DIR") or user_data_dir(APP_NAME, APP_AUTHOR))


def ensure_data_dir(path: Path | None = None) -> Path:
    target = path or DATA_DIR
    target.mkdir(parents=True, exist_ok=True)
    return target
