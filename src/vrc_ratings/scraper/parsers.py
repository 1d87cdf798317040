"""Parsers for RobotEvents API JSON payloads."""

from datetime import date
from typing import Optional

from .models import Alliance, AllianceTeam, EventSummary, IdInfo, MatchReport, PageMeta


def _parse_int(value, default: int = 0) -> int:
    """Parse an integer field that may be missing or null."""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _parse_date(date_str: Optional[str]) -> Optional[date]:
    """Parse the date part of an ISO timestamp like '2024-01-06T00:00:00-05:00'."""
    if not date_str:
        return None
    try:
        return date.fromisoformat(date_str[:10])
    except ValueError:
        return None


def parse_id_info(data: Optional[dict]) -> Optional[IdInfo]:
    """Parse a {id, name, code} reference."""
    if not data:
        return None
    return IdInfo(
        id=_parse_int(data.get("id")),
        name=data.get("name") or "",
        code=data.get("code"),
    )


def parse_alliance(data: dict) -> Alliance:
    """Parse one alliance with its team slots in report order."""
    teams = []
    for slot in data.get("teams") or []:
        team = parse_id_info(slot.get("team"))
        if team is None:
            continue
        teams.append(AllianceTeam(team=team, sitting=bool(slot.get("sitting", False))))

    return Alliance(
        color=data.get("color") or "",
        score=_parse_int(data.get("score")),
        teams=teams,
    )


def parse_match(data: dict) -> MatchReport:
    """Parse a single match object."""
    return MatchReport(
        id=_parse_int(data["id"]),
        event=parse_id_info(data.get("event")) or IdInfo(id=0, name=""),
        round=_parse_int(data.get("round")),
        alliances=[parse_alliance(a) for a in data.get("alliances") or []],
        started=data.get("started"),
        scheduled=data.get("scheduled"),
        name=data.get("name"),
        instance=data.get("instance"),
        matchnum=data.get("matchnum"),
        division=parse_id_info(data.get("division")),
    )


def parse_page_meta(payload: dict) -> PageMeta:
    """Parse the 'meta' block of a paginated response."""
    meta = payload.get("meta") or {}
    return PageMeta(
        current_page=_parse_int(meta.get("current_page"), 1),
        last_page=_parse_int(meta.get("last_page"), 1),
        per_page=_parse_int(meta.get("per_page")),
        total=_parse_int(meta.get("total")),
    )


def parse_matches_page(payload: dict) -> tuple[list[MatchReport], PageMeta]:
    """
    Parse a page of matches.

    Returns (match reports, pagination metadata).
    """
    reports = [parse_match(item) for item in payload.get("data") or []]
    return reports, parse_page_meta(payload)


def parse_event(data: dict) -> EventSummary:
    """Parse a single event object."""
    return EventSummary(
        event_id=_parse_int(data["id"]),
        name=data.get("name") or "",
        sku=data.get("sku"),
        start_date=_parse_date(data.get("start")),
        division_ids=[_parse_int(d.get("id")) for d in data.get("divisions") or []],
    )


def parse_events_page(payload: dict) -> tuple[list[EventSummary], PageMeta]:
    """
    Parse a page of events.

    Returns (events, pagination metadata).
    """
    events = [parse_event(item) for item in payload.get("data") or []]
    return events, parse_page_meta(payload)
