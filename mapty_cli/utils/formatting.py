"""Formatting helpers used by console output."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from mapty_cli.core.constants import CYCLING, KIND_ICONS, RUNNING


def format_number(value: Any) -> str:
    """Render a stored number the way it was entered (``5``, ``5.2``)."""
    if value is None:
        return "-"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    if number.is_integer():
        return str(int(number))
    return str(number)


def format_metric(value: Any) -> str:
    """Derived metrics are shown with one decimal."""
    if value is None:
        return "-"
    try:
        return f"{float(value):.1f}"
    except (TypeError, ValueError):
        return str(value)


def format_location(location: Optional[List[float]]) -> str:
    if not location or len(location) != 2:
        return "-"
    return f"{float(location[0]):.5f}, {float(location[1]):.5f}"


def workout_details(record: Dict[str, Any]) -> List[Tuple[str, str, str]]:
    """Return (icon, value, unit) detail rows for a stored workout."""
    kind = record.get("kind")
    rows = [
        (KIND_ICONS.get(kind, "•"), format_number(record.get("distanceKm")), "km"),
        ("⏱", format_number(record.get("durationMin")), "min"),
    ]
    if kind == RUNNING:
        rows.append(("⚡️", format_metric(record.get("paceMinPerKm")), "min/km"))
        rows.append(("🦶🏼", format_number(record.get("cadenceSpm")), "spm"))
    elif kind == CYCLING:
        rows.append(("⚡️", format_metric(record.get("speedKmh")), "km/h"))
        rows.append(("⛰", format_number(record.get("elevationGainM")), "m"))
    return rows


def workout_summary(record: Dict[str, Any]) -> str:
    """One-line summary: description followed by the detail rows."""
    details = "  ".join(f"{icon} {value} {unit}" for icon, value, unit in workout_details(record))
    return f"{record.get('description', 'Workout')}  {details}"


def workout_row(record: Dict[str, Any]) -> List[str]:
    """Columns for tables and tab-separated output."""
    kind = record.get("kind")
    if kind == RUNNING:
        metric = f"{format_metric(record.get('paceMinPerKm'))} min/km"
        extra = f"{format_number(record.get('cadenceSpm'))} spm"
    elif kind == CYCLING:
        metric = f"{format_metric(record.get('speedKmh'))} km/h"
        extra = f"{format_number(record.get('elevationGainM'))} m"
    else:
        metric = extra = "-"
    return [
        str(record.get("id", "")),
        str(record.get("description", "")),
        f"{format_number(record.get('distanceKm'))} km",
        f"{format_number(record.get('durationMin'))} min",
        metric,
        extra,
    ]
