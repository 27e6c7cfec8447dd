"""Parse analytics date ranges in café local time."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from ..domain import BadRequest


def local_tz(offset_minutes: int) -> timezone:
    """Return the fixed-offset zone for ``offset_minutes`` east of UTC."""

    return timezone(timedelta(minutes=offset_minutes))


def parse_bound(raw: str | None, tz: timezone, *, end: bool, name: str) -> datetime | None:
    """Parse an ISO date or datetime into an aware UTC datetime.

    A bare date covers the whole local day, so it maps to the first instant
    for a start bound and the last instant for an end bound. Naive datetimes
    are taken as café local time.
    """

    if raw is None or not raw.strip():
        return None
    raw = raw.strip()
    try:
        if len(raw) == 10:
            day = date.fromisoformat(raw)
            value = datetime.combine(day, time.max if end else time.min, tz)
        else:
            value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
            if value.tzinfo is None:
                value = value.replace(tzinfo=tz)
    except ValueError as exc:
        raise BadRequest(f"{name} must be an ISO date or datetime") from exc
    return value.astimezone(timezone.utc)


def resolve_window(
    start_raw: str | None,
    end_raw: str | None,
    tz: timezone,
    now: datetime | None = None,
) -> tuple[datetime | None, datetime | None]:
    """Return the inclusive ``(start, end)`` window in UTC.

    Without either bound the window is today's local calendar day.
    """

    start = parse_bound(start_raw, tz, end=False, name="startDate")
    end = parse_bound(end_raw, tz, end=True, name="endDate")
    if start is None and end is None:
        today = (now or datetime.now(timezone.utc)).astimezone(tz).date()
        start = datetime.combine(today, time.min, tz).astimezone(timezone.utc)
        end = datetime.combine(today, time.max, tz).astimezone(timezone.utc)
    if start is not None and end is not None and start > end:
        raise BadRequest("startDate must not be after endDate")
    return start, end
