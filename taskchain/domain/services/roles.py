"""
Role hierarchy rules.

Lower role levels are more senior; level 0 is the top administrator. Every
comparison between role levels lives in this module.
"""

from __future__ import annotations

from collections.abc import Iterable

from taskchain.domain.models import Actor

TOP_ADMINISTRATOR_LEVEL = 0


class InvalidRoleLevelError(ValueError):
    """Raised when a role level falls outside the configured hierarchy."""


def is_top_administrator(actor: Actor) -> bool:
    """The sole approver of completed work, with unrestricted visibility."""
    return actor.role_level == TOP_ADMINISTRATOR_LEVEL


def is_strictly_junior(candidate: Actor, senior: Actor) -> bool:
    return candidate.role_level > senior.role_level


def can_create_task_for(actor: Actor, candidate_assignee: Actor) -> bool:
    """Delegation only flows downwards: peers, seniors and self are refused."""
    return is_strictly_junior(candidate_assignee, actor)


def eligible_assignees(actor: Actor, all_actors: Iterable[Actor]) -> list[Actor]:
    """Actors that ``actor`` may assign work to, ordered for display.

    An empty list is valid: the most junior actors may not create tasks.
    """
    seen: dict[str, Actor] = {}
    for candidate in all_actors:
        if candidate.actor_id in seen or candidate.actor_id == actor.actor_id:
            continue
        if can_create_task_for(actor, candidate):
            seen[candidate.actor_id] = candidate
    return sorted(seen.values(), key=lambda a: (a.display_name.casefold(), a.actor_id))


def can_manage_roster(actor: Actor) -> bool:
    return is_top_administrator(actor)


def validate_role_level(level: int, *, max_level: int, allow_administrator: bool = True) -> int:
    """Return ``level`` if it lies within the hierarchy, else raise."""
    lowest = TOP_ADMINISTRATOR_LEVEL if allow_administrator else TOP_ADMINISTRATOR_LEVEL + 1
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidRoleLevelError(f"Role level must be an integer, got {level!r}")
    if level < lowest or level > max_level:
        raise InvalidRoleLevelError(f"Role level {level} is outside {lowest}..{max_level}")
    return level


def role_title(level: int) -> str:
    if level == TOP_ADMINISTRATOR_LEVEL:
        return "Administrator"
    if level > TOP_ADMINISTRATOR_LEVEL:
        return f"Staff level {level}"
    return "User"
