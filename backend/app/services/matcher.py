from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass
from typing import TypeVar

ProjectKey = TypeVar("ProjectKey")

FULL_MATCH_POINTS = 2
PARTIAL_MATCH_POINTS = 1


class NotFoundError(LookupError):
    """A referenced user, project or skill does not exist."""


@dataclass(frozen=True)
class SkillRequirement:
    skill_id: Hashable
    level: int


@dataclass(frozen=True)
class SkillHolding:
    skill_id: Hashable
    level: int
    note: str | None = None


@dataclass(frozen=True)
class MatchResult:
    matched_skill_count: int
    match_score: int


@dataclass(frozen=True)
class SkillCandidate:
    user_id: Hashable
    level: int


def score_project_for_user(
    holdings: Iterable[SkillHolding],
    requirements: Iterable[SkillRequirement],
) -> MatchResult:
    """2 points per requirement met at level, 1 below it; percent of the maximum, half-up."""
    held_levels = {holding.skill_id: holding.level for holding in holdings}

    raw_score = 0
    matched = 0
    required_count = 0
    for requirement in requirements:
        required_count += 1
        held_level = held_levels.get(requirement.skill_id)
        if held_level is None:
            continue
        matched += 1
        if held_level >= requirement.level:
            raw_score += FULL_MATCH_POINTS
        else:
            raw_score += PARTIAL_MATCH_POINTS

    total_possible = FULL_MATCH_POINTS * required_count
    return MatchResult(
        matched_skill_count=matched,
        match_score=_percent_half_up(raw_score, total_possible),
    )


def score_user_for_project(
    user_id: Hashable,
    project_id: Hashable,
    holdings_by_user: Mapping[Hashable, Iterable[SkillHolding]],
    requirements_by_project: Mapping[Hashable, Iterable[SkillRequirement]],
) -> MatchResult:
    """Same score, looked up by id in data the caller has already loaded."""
    if user_id not in holdings_by_user:
        raise NotFoundError(f"user {user_id!r} not found")
    if project_id not in requirements_by_project:
        raise NotFoundError(f"project {project_id!r} not found")
    return score_project_for_user(holdings_by_user[user_id], requirements_by_project[project_id])


def rank_projects_for_user(
    holdings: Iterable[SkillHolding],
    candidates: Iterable[tuple[ProjectKey, Iterable[SkillRequirement]]],
) -> list[tuple[ProjectKey, MatchResult]]:
    holdings = list(holdings)
    scored = [
        (project, score_project_for_user(holdings, requirements))
        for project, requirements in candidates
    ]
    # list.sort is stable, ties stay in candidate order
    scored.sort(key=lambda item: item[1].match_score, reverse=True)
    return scored


def matching_users_for_skill(
    skill_id: Hashable,
    required_level: int,
    candidates: Mapping[Hashable, Iterable[SkillHolding]],
) -> list[SkillCandidate]:
    out: list[SkillCandidate] = []
    for user_id, holdings in candidates.items():
        for holding in holdings:
            if holding.skill_id == skill_id and holding.level >= required_level:
                out.append(SkillCandidate(user_id=user_id, level=holding.level))
                break

    out.sort(key=lambda candidate: (-candidate.level, _sort_key(candidate.user_id)))
    return out


def _percent_half_up(num: int, den: int) -> int:
    if den <= 0:
        return 0
    # round(100 * num / den) with halves rounded up, in integer arithmetic
    return min(max((200 * num + den) // (2 * den), 0), 100)


def _sort_key(value: Hashable) -> tuple[int, object]:
    if isinstance(value, (int, float)):
        return (0, value)
    return (1, str(value))
