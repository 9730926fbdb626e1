import pytest

from app.services.matcher import (
    NotFoundError,
    SkillCandidate,
    SkillHolding,
    SkillRequirement,
    matching_users_for_skill,
    rank_projects_for_user,
    score_project_for_user,
    score_user_for_project,
)


def _holdings(**levels):
    return [SkillHolding(skill_id=name, level=level) for name, level in levels.items()]


def _requirements(**levels):
    return [SkillRequirement(skill_id=name, level=level) for name, level in levels.items()]


def test_partial_coverage_scores_half():
    result = score_project_for_user(_holdings(Python=5), _requirements(Python=3, React=2))

    assert result.matched_skill_count == 1
    assert result.match_score == 50


def test_project_without_requirements_scores_zero():
    assert score_project_for_user(_holdings(Python=5), []).match_score == 0
    assert score_project_for_user([], []).match_score == 0


def test_skill_held_below_required_level_earns_one_point():
    result = score_project_for_user(_holdings(JavaScript=2), _requirements(JavaScript=4))

    assert result.matched_skill_count == 1
    assert result.match_score == 50


def test_full_coverage_scores_hundred():
    result = score_project_for_user(_holdings(English=5, Design=5), _requirements(English=3, Design=3))

    assert result.matched_skill_count == 2
    assert result.match_score == 100


def test_no_overlap_scores_zero():
    result = score_project_for_user(_holdings(Cooking=4), _requirements(Python=1, SQL=2))

    assert result.matched_skill_count == 0
    assert result.match_score == 0


def test_exact_required_level_counts_as_full_match():
    result = score_project_for_user(_holdings(Python=3), _requirements(Python=3))

    assert result.match_score == 100


def test_percentage_rounds_half_up():
    # 1 of 6 points -> 16.67%
    assert score_project_for_user(_holdings(A=1), _requirements(A=2, B=1, C=1)).match_score == 17
    # 5 of 8 points -> 62.5%
    five_of_eight = score_project_for_user(_holdings(A=5, B=5, C=1), _requirements(A=1, B=1, C=2, D=1))
    assert five_of_eight.match_score == 63
    # 1 of 8 points -> 12.5%
    assert score_project_for_user(_holdings(A=1), _requirements(A=2, B=1, C=1, D=1)).match_score == 13


def test_score_does_not_depend_on_input_order():
    holdings = _holdings(A=1, B=4, C=2)
    requirements = _requirements(A=3, B=2, D=5)

    forward = score_project_for_user(holdings, requirements)
    backward = score_project_for_user(list(reversed(holdings)), list(reversed(requirements)))

    assert forward == backward


@pytest.mark.parametrize(
    "held",
    [{}, {"A": 1}, {"A": 5}, {"A": 1, "B": 1, "C": 1}, {"A": 5, "B": 5, "C": 5}, {"Z": 3}],
)
def test_score_stays_within_bounds(held):
    result = score_project_for_user(_holdings(**held), _requirements(A=3, B=3, C=3))

    assert 0 <= result.match_score <= 100
    assert 0 <= result.matched_skill_count <= 3


def test_raising_a_level_to_the_requirement_never_lowers_the_score():
    requirements = _requirements(A=4, B=2, C=3)
    before = score_project_for_user(_holdings(A=2, B=2), requirements)
    after = score_project_for_user(_holdings(A=4, B=2), requirements)

    assert after.match_score >= before.match_score
    assert after.matched_skill_count == before.matched_skill_count


def test_identity_lookup_raises_not_found():
    holdings_by_user = {"alice": _holdings(Python=5), "bob": []}
    requirements_by_project = {"p1": _requirements(Python=3)}

    assert score_user_for_project("alice", "p1", holdings_by_user, requirements_by_project).match_score == 100
    assert score_user_for_project("bob", "p1", holdings_by_user, requirements_by_project).match_score == 0

    with pytest.raises(NotFoundError):
        score_user_for_project("carol", "p1", holdings_by_user, requirements_by_project)
    with pytest.raises(NotFoundError):
        score_user_for_project("alice", "p2", holdings_by_user, requirements_by_project)


def test_ranking_orders_by_score_and_keeps_input_order_on_ties():
    holdings = _holdings(Python=4, SQL=1)
    candidates = [
        ("sql-only", _requirements(SQL=3)),
        ("python", _requirements(Python=3)),
        ("empty", []),
        ("sql-again", _requirements(SQL=2)),
        ("mixed", _requirements(Python=3, Go=2)),
    ]

    ranked = rank_projects_for_user(holdings, candidates)

    assert [project for project, _ in ranked] == ["python", "sql-only", "sql-again", "mixed", "empty"]
    scores = [result.match_score for _, result in ranked]
    assert scores == sorted(scores, reverse=True)


def test_ranking_accepts_one_shot_iterables():
    holdings = iter(_holdings(Python=4))
    candidates = ((name, _requirements(Python=level)) for name, level in [("a", 5), ("b", 3)])

    ranked = rank_projects_for_user(holdings, candidates)

    assert [(project, result.match_score) for project, result in ranked] == [("b", 100), ("a", 50)]


def test_matching_users_filters_by_level_and_sorts_descending():
    candidates = {
        "user-a": _holdings(Python=5),
        "user-b": _holdings(Python=2),
        "user-c": _holdings(React=5),
    }

    assert matching_users_for_skill("Python", 4, candidates) == [SkillCandidate(user_id="user-a", level=5)]


def test_matching_users_never_returns_levels_below_requirement():
    candidates = {
        1: _holdings(Python=3),
        2: _holdings(Python=4, SQL=1),
        3: _holdings(Python=5),
        4: _holdings(Python=4),
        5: _holdings(SQL=5),
    }

    matched = matching_users_for_skill("Python", 4, candidates)

    assert [candidate.user_id for candidate in matched] == [3, 2, 4]
    assert all(candidate.level >= 4 for candidate in matched)
    assert matching_users_for_skill("Python", 1, {}) == []
