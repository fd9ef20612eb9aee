import json
import logging
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ValidationError, field_validator

from inventorypro.config import get_settings

logger = logging.getLogger(__name__)

ITEMS_PER_PAGE_CHOICES = (10, 25, 50, 100)


class Preferences(BaseModel):
    theme: Literal["light", "dark", "system"] = "light"
    low_stock_notifications: bool = True
    compact_view: bool = False
    items_per_page: int = 10

    @field_validator("items_per_page")
    @classmethod
    def _check_items_per_page(cls, value: int) -> int:
        if value not in ITEMS_PER_PAGE_CHOICES:
            raise ValueError(
                "items_per_page must be one of {}".format(
                    ", ".join(str(choice) for choice in ITEMS_PER_PAGE_CHOICES)
                )
            )
        return value


def _resolve_path(path: Optional[str | Path]) -> Path:
    if path is None:
        path = get_settings().PREFERENCES_PATH
    return Path(path)


def load_preferences(path: Optional[str | Path] = None) -> Preferences:
    preferences_path = _resolve_path(path)
    if not preferences_path.exists():
        return Preferences()
    try:
        raw = json.loads(preferences_path.read_text(encoding="utf-8"))
        return Preferences.model_validate(raw)
    except (OSError, ValueError, ValidationError) as exc:
        logger.warning("Ignoring unreadable preferences file %s: %s", preferences_path, exc)
        return Preferences()


def save_preferences(preferences: Preferences, path: Optional[str | Path] = None) -> Path:
    preferences_path = _resolve_path(path)
    preferences_path.parent.mkdir(parents=True, exist_ok=True)
    preferences_path.write_text(
        json.dumps(preferences.model_dump(), indent=2),
        encoding="utf-8",
    )
    return preferences_path


__all__ = ["Preferences", "load_preferences", "save_preferences"]
