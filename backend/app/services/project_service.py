from __future__ import annotations

import logging

from sqlalchemy import desc, exists, or_, select
from sqlalchemy import delete as sa_delete
from sqlalchemy.orm import Session, selectinload

from app import models
from app.services.matcher import (
    MatchResult,
    NotFoundError,
    SkillRequirement,
    matching_users_for_skill,
    rank_projects_for_user,
)
from app.services.profile_service import holdings_by_skill_holders, holdings_for_user

logger = logging.getLogger(__name__)


def _project_query():
    return select(models.Project).options(
        selectinload(models.Project.creator),
        selectinload(models.Project.required_skills).selectinload(models.ProjectSkill.skill),
    )


def list_projects(
    db: Session,
    *,
    q: str | None = None,
    skill_id: int | None = None,
) -> list[models.Project]:
    stmt = _project_query()
    if q:
        pattern = f"%{q.strip()}%"
        stmt = stmt.where(or_(models.Project.title.ilike(pattern), models.Project.description.ilike(pattern)))
    if skill_id is not None:
        stmt = stmt.where(
            exists().where(
                models.ProjectSkill.project_id == models.Project.id,
                models.ProjectSkill.skill_id == skill_id,
            )
        )
    stmt = stmt.order_by(desc(models.Project.created_at), desc(models.Project.id))
    return list(db.scalars(stmt).all())


def list_projects_by_creator(db: Session, *, creator_id: int) -> list[models.Project]:
    stmt = (
        _project_query()
        .where(models.Project.creator_id == creator_id)
        .order_by(desc(models.Project.created_at), desc(models.Project.id))
    )
    return list(db.scalars(stmt).all())


def get_project(db: Session, *, project_id: int) -> models.Project:
    project = db.scalar(_project_query().where(models.Project.id == project_id))
    if not project:
        raise NotFoundError("project not found")
    return project


def create_project(
    db: Session,
    *,
    creator_id: int,
    title: str,
    description: str,
    required_skills: list[tuple[int, int]],
) -> models.Project:
    _validate_required_skills(db, required_skills)

    project = models.Project(title=title, description=description, creator_id=creator_id)
    try:
        db.add(project)
        db.flush()
        _add_requirements(db, project.id, required_skills)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("project creation failed for user %s", creator_id)
        raise

    logger.info("user %s created project %s", creator_id, project.id)
    return get_project(db, project_id=project.id)


def update_project(
    db: Session,
    *,
    project_id: int,
    editor_id: int,
    title: str,
    description: str,
    status: str | None = None,
    required_skills: list[tuple[int, int]] | None = None,
) -> models.Project:
    project = _get_owned_project(db, project_id=project_id, user_id=editor_id)
    if required_skills is not None:
        _validate_required_skills(db, required_skills)

    try:
        project.title = title
        project.description = description
        if status:
            project.status = status
        db.add(project)

        if required_skills is not None:
            db.execute(sa_delete(models.ProjectSkill).where(models.ProjectSkill.project_id == project.id))
            db.flush()
            _add_requirements(db, project.id, required_skills)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("project update failed for project %s", project_id)
        raise

    return get_project(db, project_id=project_id)


def delete_project(db: Session, *, project_id: int, user_id: int) -> None:
    project = _get_owned_project(db, project_id=project_id, user_id=user_id)
    try:
        db.delete(project)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("project deletion failed for project %s", project_id)
        raise
    logger.info("user %s deleted project %s", user_id, project_id)


def requirements_for_project(project: models.Project) -> list[SkillRequirement]:
    return [SkillRequirement(skill_id=item.skill_id, level=item.level) for item in project.required_skills]


def match_projects_for_user(db: Session, *, user_id: int) -> list[tuple[models.Project, MatchResult]]:
    if not db.get(models.User, user_id):
        raise NotFoundError("user not found")

    holdings = holdings_for_user(db, user_id=user_id)
    # no skills, no matches
    if not holdings:
        return []

    held_skill_ids = [holding.skill_id for holding in holdings]
    stmt = (
        _project_query()
        .where(models.Project.creator_id != user_id)
        .where(
            exists().where(
                models.ProjectSkill.project_id == models.Project.id,
                models.ProjectSkill.skill_id.in_(held_skill_ids),
            )
        )
        .order_by(desc(models.Project.created_at), desc(models.Project.id))
    )
    candidates = [(project, requirements_for_project(project)) for project in db.scalars(stmt).all()]

    ranked = rank_projects_for_user(holdings, candidates)
    logger.debug("ranked %d candidate projects for user %s", len(ranked), user_id)
    return ranked


def matching_users_for_project(
    db: Session,
    project: models.Project,
) -> list[tuple[models.ProjectSkill, list[tuple[models.User, int]]]]:
    skill_ids = [item.skill_id for item in project.required_skills]
    candidates = holdings_by_skill_holders(db, skill_ids=skill_ids)

    users_by_id: dict[int, models.User] = {}
    if candidates:
        users_by_id = {
            user.id: user
            for user in db.scalars(select(models.User).where(models.User.id.in_(list(candidates)))).all()
        }

    out: list[tuple[models.ProjectSkill, list[tuple[models.User, int]]]] = []
    for requirement in project.required_skills:
        matched = matching_users_for_skill(requirement.skill_id, requirement.level, candidates)
        out.append((requirement, [(users_by_id[item.user_id], item.level) for item in matched]))
    return out


def _get_owned_project(db: Session, *, project_id: int, user_id: int) -> models.Project:
    project = db.get(models.Project, project_id)
    if not project:
        raise NotFoundError("project not found")
    if project.creator_id != user_id:
        raise PermissionError("not the project owner")
    return project


def _validate_required_skills(db: Session, required_skills: list[tuple[int, int]]) -> None:
    skill_ids = [skill_id for skill_id, _level in required_skills]
    if len(set(skill_ids)) != len(skill_ids):
        raise ValueError("a skill can only be required once per project")
    if not skill_ids:
        return

    known = set(db.scalars(select(models.Skill.id).where(models.Skill.id.in_(skill_ids))).all())
    missing = sorted(set(skill_ids) - known)
    if missing:
        raise NotFoundError(f"skill not found: {missing[0]}")


def _add_requirements(db: Session, project_id: int, required_skills: list[tuple[int, int]]) -> None:
    for skill_id, level in required_skills:
        db.add(models.ProjectSkill(project_id=project_id, skill_id=skill_id, level=level))
    db.flush()
