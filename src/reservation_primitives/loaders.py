"""Loading calendars, resources and whole managers from JSON files."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

from reservation_primitives.calendar import WorkingCalendar
from reservation_primitives.config import DEFAULT_SETTINGS, SearchSettings
from reservation_primitives.manager import Resource, ResourceManager
from reservation_primitives.resolution import HOUR, MINUTE, TimeResolution
from reservation_primitives.schema import validate_resource

RESOLUTIONS = {"minute": MINUTE, "hour": HOUR}


def _read(path: Path) -> Any:
    with open(path) as f:
        return json.load(f)


def _fail(errors: list[str], context: str) -> None:
    if errors:
        raise ValueError(
            f"Validation errors in {context}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def calendar_from_definition(resource_id: str, definition: Mapping[str, Any]) -> WorkingCalendar:
    """Build a WorkingCalendar from a resource definition. Raises ValueError."""
    _fail(validate_resource(definition), resource_id)

    exceptions = definition.get("exceptions", {})
    if "daily" in definition:
        start, end = definition["daily"]
        return WorkingCalendar.daily(resource_id, start, end, exceptions)
    rules = {int(k): v for k, v in definition["rules"].items()}
    return WorkingCalendar(resource_id, rules, exceptions)


def _build_resources(
    definitions: Mapping[str, Any],
    epoch: datetime,
    resolution: TimeResolution,
    settings: SearchSettings,
) -> list[Resource]:
    return [
        Resource.from_calendar(
            calendar_from_definition(resource_id, definition),
            epoch, resolution, settings,
        )
        for resource_id, definition in definitions.items()
    ]


def load_calendar_json(path: str | Path) -> WorkingCalendar:
    """Load a single WorkingCalendar.

    {
        "id": "...",
        "calendar": {"rules": {"0": [["08:00", "17:00"]]}, "exceptions": {}}
    }

    "calendar" may also be a {"daily": [start, end]} definition.
    """
    path = Path(path)
    data = _read(path)
    definition = data.get("calendar", data)
    return calendar_from_definition(data.get("id", path.stem), definition)


def load_resources_json(
    path: str | Path,
    epoch: datetime,
    resolution: TimeResolution = MINUTE,
    settings: SearchSettings = DEFAULT_SETTINGS,
) -> list[Resource]:
    """Load resources from {"resources": {"ID": definition, ...}}.

    Order follows the file.
    """
    return _build_resources(_read(Path(path))["resources"], epoch, resolution, settings)


def load_manager_json(path: str | Path, reference: datetime | None = None) -> ResourceManager:
    """Build a ResourceManager from one file.

    {
        "epoch": "2013-03-21T00:00:00",
        "resolution": "minute",          optional, "minute" or "hour"
        "settings": {"search_bound": 500},   optional
        "resources": {"A": {"daily": ["08:00", "16:00"]}, ...}
    }

    The manager's reference instant is `reference`, or the epoch.
    """
    path = Path(path)
    data = _read(path)

    epoch = datetime.fromisoformat(data["epoch"])
    res_name = data.get("resolution", "minute")
    if res_name not in RESOLUTIONS:
        raise ValueError(f"Unknown resolution {res_name!r} in {path.name}")
    resolution = RESOLUTIONS[res_name]
    settings = SearchSettings.from_mapping(data.get("settings", {}))

    resources = _build_resources(data["resources"], epoch, resolution, settings)
    start = resolution.to_int(reference or epoch, epoch, "floor")
    return ResourceManager(resources, start, settings)
