"""Runtime configuration read from the environment.

A ``.env`` file in the working directory is loaded first, so local
overrides do not need to be exported by hand.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from promo.domain.model.value_objects import DEFAULT_CURRENCY

load_dotenv()

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class PromoSettings:
    def __init__(self) -> None:
        self.DATA_DIR = Path(os.getenv("PROMO_DATA_DIR", str(_DEFAULT_DATA_DIR)))
        self.CURRENCY = os.getenv("PROMO_CURRENCY", DEFAULT_CURRENCY).upper()
        self.ACTIVE_OFFERS_LIMIT = int(os.getenv("PROMO_ACTIVE_OFFERS_LIMIT", "10"))
        self.LOG_LEVEL = os.getenv("PROMO_LOG_LEVEL", "WARNING").upper()

    @property
    def offers_file(self) -> Path:
        return self.DATA_DIR / "offers.json"
