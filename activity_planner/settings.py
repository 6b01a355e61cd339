from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from activity_planner.file_store import default_data_path
from activity_planner.models import Category
from activity_planner.recommendations import (
    DEFAULT_RECOMMENDATIONS,
    RecommendationTable,
    freeze_recommendations,
)


@dataclass(frozen=True)
class Settings:
    """
    Application settings.

    Fields:
    - data_file: planner file used by "open on start" and "save". Default './userData.txt'
    - strict_parsing: fail a whole load on the first malformed field (default: false,
      malformed fields are reported and left at their defaults)
    - recommendations: per-category daily/weekly/monthly target minutes
    """

    data_file: Path
    strict_parsing: bool
    recommendations: RecommendationTable


def get_settings(
    data_file: Optional[str | Path] = None,
    *,
    strict_parsing: bool = False,
    recommendations: Optional[Mapping[Category, tuple[int, int, int]]] = None,
) -> Settings:
    """Return application settings, filling in defaults for anything not given."""
    path = Path(data_file) if data_file else default_data_path()
    table = freeze_recommendations(recommendations) if recommendations is not None else DEFAULT_RECOMMENDATIONS
    return Settings(
        data_file=path,
        strict_parsing=bool(strict_parsing),
        recommendations=table,
    )
