"""
Building (scope) configuration.
Each building decides how coverage is recorded: by named periods or by time range.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Union


@dataclass(frozen=True)
class CoverageType:
    label: str
    value: Union[Decimal, str]  # "custom" for time-range buildings


@dataclass(frozen=True)
class BuildingConfig:
    code: str
    name: str
    schedule_type: str  # "periods" | "time_range"
    periods: list[str] = field(default_factory=list)
    coverage_types: list[CoverageType] = field(default_factory=list)
    increment: Optional[int] = None  # minutes, time_range buildings only


FULL_PERIOD = CoverageType("Full Period", Decimal("1"))
HALF_PERIOD = CoverageType("Half Period", Decimal("0.5"))
TIME_DURATION = CoverageType("Time Duration", "custom")

BUILDING_CONFIG: dict[str, BuildingConfig] = {
    "OMS": BuildingConfig(
        code="OMS",
        name="Orono Middle School",
        schedule_type="periods",
        periods=[
            "Period 1 - 8:10 - 8:57",
            "Period 2 - 9:01 - 9:48",
            "Period 3 - 9:52 - 10:39",
            "Period 4 - 10:43 - 11:09",
            "Period 5 - 11:11 - 11:37",
            "Period 4/5 - 10:30 - 11:37",
            "Period 6 - 11:40 - 12:06",
            "Period 7 - 12:08 - 12:34",
            "Period 6/7 - 11:40 - 12:34",
            "Period 8 - 12:37 - 1:08",
            "Period 9 - 1:12 - 1:59",
            "Period 10 - 2:03 - 2:50",
        ],
        coverage_types=[FULL_PERIOD, HALF_PERIOD],
    ),
    "OHS": BuildingConfig(
        code="OHS",
        name="Orono High School",
        schedule_type="periods",
        periods=["Period 1", "Period 2", "Period 3", "Period 4"],
        coverage_types=[FULL_PERIOD],
    ),
    "OIS": BuildingConfig(
        code="OIS",
        name="Orono Intermediate School",
        schedule_type="time_range",
        coverage_types=[TIME_DURATION],
        increment=15,
    ),
    "SES": BuildingConfig(
        code="SES",
        name="Schumann Elementary School",
        schedule_type="time_range",
        coverage_types=[TIME_DURATION],
        increment=15,
    ),
}

FALLBACK_BUILDING = "OMS"


def normalize_building_code(code: Optional[str]) -> Optional[str]:
    if code is None:
        return None
    code = str(code).strip().upper()
    return code or None


def building_exists(code: Optional[str]) -> bool:
    code = normalize_building_code(code)
    return code is not None and code in BUILDING_CONFIG


def get_building_config(code: Optional[str]) -> BuildingConfig:
    """Config for a building code, OMS when the code is unknown."""
    code = normalize_building_code(code)
    return BUILDING_CONFIG.get(code, BUILDING_CONFIG[FALLBACK_BUILDING])


# "Period 6 - 11:40" and "Period 7 - 12:08" but not "Period 6/7 - ..."
_SHORT_PERIOD = re.compile(r"\bPeriod [67] ")


def calculate_periods(period: Optional[str], duration_type: Optional[str]) -> Decimal:
    """
    Hours credited for one coverage.

    Periods 6 and 7 on their own are always half periods. Everything else
    (including the combined 6/7 block) follows the Full/Half label.
    """
    if period and _SHORT_PERIOD.search(str(period)) and "Period 6/" not in str(period):
        return Decimal("0.5")

    label = str(duration_type or "").lower()
    if "full" in label:
        return Decimal("1")
    if "half" in label:
        return Decimal("0.5")
    return Decimal("1")
