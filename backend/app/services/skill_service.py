from __future__ import annotations

import logging

from sqlalchemy import desc, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app import models
from app.services.matcher import NotFoundError

logger = logging.getLogger(__name__)


def list_skills(db: Session) -> list[models.Skill]:
    return list(db.scalars(select(models.Skill).order_by(models.Skill.category, models.Skill.name)).all())


def list_categories(db: Session) -> list[tuple[str | None, list[models.Skill]]]:
    grouped: dict[str | None, list[models.Skill]] = {}
    for skill in list_skills(db):
        grouped.setdefault(skill.category, []).append(skill)
    return list(grouped.items())


def search_skills(db: Session, *, term: str) -> list[models.Skill]:
    pattern = f"%{term}%"
    return list(
        db.scalars(
            select(models.Skill)
            .where(
                or_(
                    models.Skill.name.ilike(pattern),
                    models.Skill.category.ilike(pattern),
                    models.Skill.description.ilike(pattern),
                )
            )
            .order_by(models.Skill.name)
        ).all()
    )


def get_skill(db: Session, *, skill_id: int) -> models.Skill:
    skill = db.get(models.Skill, skill_id)
    if not skill:
        raise NotFoundError("skill not found")
    return skill


def list_holders(db: Session, *, skill_id: int) -> list[tuple[models.User, int]]:
    rows = db.execute(
        select(models.User, models.UserSkill.level)
        .join(models.UserSkill, models.UserSkill.user_id == models.User.id)
        .where(models.UserSkill.skill_id == skill_id)
        .order_by(desc(models.UserSkill.level), models.User.id)
    ).all()
    return [(user, level) for user, level in rows]


def create_skill(
    db: Session,
    *,
    name: str,
    category: str,
    description: str | None = None,
) -> models.Skill:
    if _skill_name_taken(db, name=name):
        raise ValueError("skill already exists")

    skill = models.Skill(name=name, category=category, description=description)
    db.add(skill)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValueError("skill already exists") from exc
    db.refresh(skill)
    logger.info("created skill %s (%s)", skill.id, skill.name)
    return skill


def _skill_name_taken(db: Session, *, name: str) -> bool:
    existing = db.scalar(select(models.Skill.id).where(func.lower(models.Skill.name) == name.lower()))
    return existing is not None
