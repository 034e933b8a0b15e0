"""Field normalization between stored rows, inbound payloads and API records.

The roster has gone through two naming schemes. Older rows and clients say
``unit`` and ``clearance``; newer ones say ``workplace`` and ``affiliation``.
Everything that crosses the storage boundary goes through this module so the
rest of the service only ever sees the canonical shape.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

DEFAULT_STATS: dict[str, str] = {
    "affiliation": "",
    "threat": "Medium",
    "loyalty": "Unknown",
}

# Canonical field -> legacy input keys, checked after the canonical key.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "workplace": ("unit",),
    "affiliation": ("clearance",),
}

# Canonical field <-> physical column in the ``people`` table.
FIELD_COLUMNS: dict[str, str] = {"workplace": "unit"}
COLUMN_FIELDS: dict[str, str] = {column: name for name, column in FIELD_COLUMNS.items()}

TEXT_FIELDS = ("name", "callsign", "role", "description", "image_url", "dossier_notes")
LIST_FIELDS = ("traits", "proficiencies")


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def resolve_alias(name: str, *sources: Mapping[str, Any] | None) -> Any:
    """Return the first non-empty value for ``name`` across ``sources``.

    The canonical key is tried in every source before any legacy alias, so
    ``resolve_alias("affiliation", stats, raw)`` checks ``stats.affiliation``,
    ``raw.affiliation``, ``stats.clearance`` and then ``raw.clearance``.
    """
    for key in (name, *FIELD_ALIASES.get(name, ())):
        for source in sources:
            if not source:
                continue
            value = source.get(key)
            if value:
                return value
    return ""


def column_for(name: str) -> str:
    return FIELD_COLUMNS.get(name, name)


def field_for(column: str) -> str:
    return COLUMN_FIELDS.get(column, column)


def fields_from_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """Re-key a stored row by canonical field name.

    Column keys are kept alongside, and a non-empty canonical key already in
    ``row`` wins over its column.
    """
    fields = dict(row)
    for column, value in row.items():
        name = field_for(column)
        if name != column and not fields.get(name):
            fields[name] = value
    return fields


def normalize_list(value: Any) -> list[str]:
    """Clean a comma-separated string or a sequence into a list of entries."""
    if isinstance(value, str):
        entries = value.split(",")
    elif isinstance(value, (list, tuple)):
        entries = [str(entry) for entry in value if entry is not None]
    else:
        return []
    return [entry.strip() for entry in entries if entry.strip()]


def _finite_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if math.isfinite(value) else None


def coerce_coordinate(value: Any) -> float | None:
    """Parse a coordinate from a number or numeric string.

    Returns ``None`` for anything that is not a finite number, including
    blanks, booleans, ``"nan"`` and ``"inf"``.
    """
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = float(value)
        except ValueError:
            return None
    return _finite_number(value)


def _timestamp(value: Any) -> datetime | str | None:
    if isinstance(value, datetime):
        # SQLite hands back naive values; everything is written in UTC
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str) and value:
        return value
    return None


def build_stats_payload(stats: Mapping[str, Any] | None = None) -> dict[str, str]:
    """Shape a stats block, accepting ``clearance`` for ``affiliation``."""
    stats = _as_mapping(stats)
    return {
        "affiliation": _text(resolve_alias("affiliation", stats))
        or DEFAULT_STATS["affiliation"],
        "threat": _text(stats.get("threat")) or DEFAULT_STATS["threat"],
        "loyalty": _text(stats.get("loyalty")) or DEFAULT_STATS["loyalty"],
    }


def normalize_record(raw: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Convert a stored row into the canonical person record."""
    if raw is None:
        return None

    raw = fields_from_row(raw)
    stats = _as_mapping(raw.get("stats"))
    workplace = _text(resolve_alias("workplace", raw))
    affiliation = _text(resolve_alias("affiliation", stats, raw))

    return {
        "id": raw.get("id"),
        "name": _text(raw.get("name")),
        "callsign": _text(raw.get("callsign")),
        "role": _text(raw.get("role")),
        "workplace": workplace,
        "unit": workplace,
        "description": _text(raw.get("description")),
        "image_url": _text(raw.get("image_url")),
        "traits": normalize_list(raw.get("traits")),
        "proficiencies": normalize_list(raw.get("proficiencies")),
        "dossier_notes": _text(raw.get("dossier_notes")),
        "affiliation": affiliation,
        "stats": {
            "affiliation": affiliation,
            "threat": _text(stats.get("threat") or raw.get("threat"))
            or DEFAULT_STATS["threat"],
            "loyalty": _text(stats.get("loyalty") or raw.get("loyalty"))
            or DEFAULT_STATS["loyalty"],
        },
        "last_seen_notes": _text(raw.get("last_seen_notes")),
        "last_seen_lat": _finite_number(raw.get("last_seen_lat")),
        "last_seen_lng": _finite_number(raw.get("last_seen_lng")),
        "last_seen_timestamp": _timestamp(raw.get("last_seen_timestamp")),
    }


def _stats_source(payload: Mapping[str, Any]) -> dict[str, Any]:
    # Top-level legacy stat keys only fill gaps left by the nested block
    source = dict(_as_mapping(payload.get("stats")))
    for key in ("affiliation", "clearance", "threat", "loyalty"):
        if not source.get(key) and payload.get(key):
            source[key] = payload[key]
    return source


def build_write_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Shape an inbound create payload into ``people`` column values."""
    stats = build_stats_payload(_stats_source(payload))
    record: dict[str, Any] = {name: _text(payload.get(name)) for name in TEXT_FIELDS}
    record[column_for("workplace")] = _text(resolve_alias("workplace", payload))
    for name in LIST_FIELDS:
        record[name] = normalize_list(payload.get(name))
    record["stats"] = stats
    record["affiliation"] = stats["affiliation"]
    return record


@dataclass
class ProfileUpdate:
    """Column changes for a profile edit.

    ``stats_patch`` holds only the stat keys the caller sent; it is merged
    over the stored stats by :func:`merge_stats` once the row is loaded.
    """

    person_id: int
    values: dict[str, Any] = field(default_factory=dict)
    stats_patch: dict[str, str] | None = None

    @property
    def is_empty(self) -> bool:
        return not self.values and not self.stats_patch


def _stats_patch(payload: Mapping[str, Any]) -> dict[str, str] | None:
    stats = _as_mapping(payload.get("stats"))
    patch: dict[str, str] = {}
    affiliation_keys = ("affiliation", *FIELD_ALIASES["affiliation"])
    if any(key in stats or key in payload for key in affiliation_keys):
        patch["affiliation"] = _text(resolve_alias("affiliation", stats, payload))
    for key in ("threat", "loyalty"):
        if key in stats or key in payload:
            patch[key] = _text(stats.get(key) or payload.get(key))
    return patch or None


def build_partial_update(person_id: int, payload: Mapping[str, Any]) -> ProfileUpdate:
    """Collect updates for the keys present in ``payload``.

    A key that is present with an empty value clears the field; a key that
    is absent leaves the stored value alone.
    """
    values: dict[str, Any] = {}
    for name in TEXT_FIELDS:
        if name in payload:
            values[name] = _text(payload[name])
    if any(key in payload for key in ("workplace", *FIELD_ALIASES["workplace"])):
        values[column_for("workplace")] = _text(resolve_alias("workplace", payload))
    for name in LIST_FIELDS:
        if name in payload:
            values[name] = normalize_list(payload[name])
    return ProfileUpdate(
        person_id=person_id,
        values=values,
        stats_patch=_stats_patch(payload),
    )


def merge_stats(
    current: Mapping[str, Any] | None, patch: Mapping[str, Any]
) -> dict[str, str]:
    """Apply a stats patch over the stored stats block."""
    merged = dict(_as_mapping(current))
    merged.pop("clearance", None)
    merged.update(patch)
    return build_stats_payload(merged)
