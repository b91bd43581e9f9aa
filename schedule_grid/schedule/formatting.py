"""Plain-text rendering of session details for the overlay."""

from __future__ import annotations

from typing import List

from .model import (
    PanelDetails,
    Person,
    PresentationDetails,
    Session,
    SessionDetails,
    TextDetails,
)

NO_DETAILS = "Details coming soon."


def format_details(session: Session) -> str:
    """Return displayable detail text for ``session``.

    Always returns a string; :data:`NO_DETAILS` is used when the payload is
    missing or empty for its kind.
    """

    text = _format(session.details)
    return text if text.strip() else NO_DETAILS


def _format(details: SessionDetails | None) -> str:
    if details is None:
        return ""
    if isinstance(details, TextDetails):
        return details.text.strip()
    if isinstance(details, PresentationDetails):
        return _format_presentations(details)
    if isinstance(details, PanelDetails):
        return _format_panel(details)
    return ""


def _format_presentations(details: PresentationDetails) -> str:
    blocks: List[str] = []
    for entry in details.presentations:
        if not entry.topic and not entry.presenter:
            continue
        lines = [entry.topic or "Untitled presentation"]
        byline = _person_line(Person(entry.presenter, entry.affiliation))
        if byline:
            lines.append(f"  {byline}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def _format_panel(details: PanelDetails) -> str:
    lines: List[str] = []
    if details.moderator is not None and details.moderator.name:
        lines.append(f"Moderator: {_person_line(details.moderator)}")
    panelists = [_person_line(p) for p in details.panelists if p.name]
    if panelists:
        lines.append("Panelists:")
        lines.extend(f"- {line}" for line in panelists)
    return "\n".join(lines)


def _person_line(person: Person) -> str:
    if not person.name:
        return person.affiliation
    if person.affiliation:
        return f"{person.name} ({person.affiliation})"
    return person.name


__all__ = ["NO_DETAILS", "format_details"]
