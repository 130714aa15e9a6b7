"""Cart snapshot records.

A snapshot is a JSON array of plain dicts, one per cart item. Records
written before first and last names were split carry a single
``student_name`` and are upgraded on load.
"""

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import NAMESPACE_URL, UUID, uuid5

from enrollment.domain.models import CartItem, Course, FamilyDiscountChoice
from enrollment.domain.value_objects import CartItemId, CourseId

logger = logging.getLogger(__name__)

UNKNOWN_FIRST_NAME = "Ukjent"
UNKNOWN_LAST_NAME = "Navn"

Record = dict[str, Any]


def is_legacy_record(record: Record) -> bool:
    return not (record.get("first_name") and record.get("last_name"))


def split_full_name(full_name: str | None) -> tuple[str, str]:
    """Split on the first whitespace, with placeholders for missing parts."""
    parts = (full_name or "").strip().split(maxsplit=1)
    first = parts[0] if parts else UNKNOWN_FIRST_NAME
    last = parts[1].strip() if len(parts) > 1 else UNKNOWN_LAST_NAME
    return first, last


def _normalize_id(raw: Any) -> str:
    try:
        return str(UUID(str(raw)))
    except ValueError:
        # Older ids were free-form strings; derive a stable uuid from them
        return str(uuid5(NAMESPACE_URL, f"cart-item:{raw}"))


def _coerce_age(raw: Any) -> int | None:
    """Read a stored age as an int.

    Raises:
        ValueError, TypeError: If the value is not a whole number.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise TypeError(f"Invalid age in cart record: {raw!r}")
    return int(raw)


def migrate_record(record: Record, now: datetime) -> Record:
    """Upgrade a stored record to the current shape.

    Applying it to an already upgraded record returns an equal record.
    """
    migrated = dict(record)

    if is_legacy_record(record):
        first, last = split_full_name(record.get("student_name"))
        migrated["first_name"] = first
        migrated["last_name"] = last
        migrated.pop("student_name", None)
        logger.info('Migrating cart item "%s" to "%s %s"', record.get("student_name"), first, last)

    migrated["id"] = _normalize_id(record.get("id"))
    migrated["age"] = _coerce_age(record.get("age"))
    migrated["courses"] = list(record.get("courses") or [])
    migrated["schedule_ids"] = list(record.get("schedule_ids") or [])
    migrated["is_second_dancer_in_family"] = bool(record.get("is_second_dancer_in_family", False))
    migrated.setdefault("family_discount_override", None)
    migrated.setdefault("added_at", now.isoformat())
    return migrated


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def course_to_record(course: Course) -> Record:
    return {
        "id": str(course.id),
        "name": course.name,
        "age_range": course.age_range,
        "course_type": course.course_type,
    }


def course_from_record(record: Record) -> Course:
    return Course(
        id=CourseId(str(record["id"])),
        name=record.get("name", ""),
        age_range=record.get("age_range", ""),
        course_type=record.get("course_type", ""),
    )


def item_to_record(item: CartItem) -> Record:
    return {
        "id": str(item.id),
        "first_name": item.first_name,
        "last_name": item.last_name,
        "age": item.age,
        "courses": [course_to_record(course) for course in item.courses],
        "schedule_ids": list(item.schedule_ids),
        "is_second_dancer_in_family": item.is_second_dancer_in_family,
        "family_discount_override": item.family_discount_override.as_flag(),
        "added_at": item.added_at.isoformat(),
    }


def item_from_record(record: Record) -> CartItem:
    """Build a cart item from a migrated record.

    Raises:
        KeyError, ValueError, TypeError: If the record is malformed.
    """
    return CartItem(
        id=CartItemId.from_string(record["id"]),
        first_name=record["first_name"],
        last_name=record["last_name"],
        age=record.get("age"),
        courses=tuple(course_from_record(course) for course in record["courses"]),
        schedule_ids=tuple(str(schedule_id) for schedule_id in record["schedule_ids"]),
        is_second_dancer_in_family=record["is_second_dancer_in_family"],
        family_discount_override=FamilyDiscountChoice.from_flag(record.get("family_discount_override")),
        added_at=_parse_timestamp(record["added_at"]),
    )
