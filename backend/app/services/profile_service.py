from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy import delete as sa_delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app import models
from app.security import hash_password, verify_password
from app.services.matcher import NotFoundError, SkillHolding

logger = logging.getLogger(__name__)


def register_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    department: str | None = None,
    grade: str | None = None,
    bio: str | None = None,
) -> models.User:
    if db.scalar(select(models.User.id).where(models.User.email == email)) is not None:
        raise ValueError("email already registered")

    user = models.User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        department=department,
        grade=grade,
        bio=bio,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # A concurrent registration won the unique email index.
        db.rollback()
        raise ValueError("email already registered") from exc
    db.refresh(user)
    logger.info("registered user %s", user.id)
    return user


def authenticate(db: Session, *, email: str, password: str) -> models.User | None:
    user = db.scalar(select(models.User).where(models.User.email == email))
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def update_profile(db: Session, user: models.User, *, fields: dict) -> models.User:
    for key in ("name", "department", "grade", "bio"):
        if key not in fields:
            continue
        if key == "name" and not fields[key]:
            continue
        setattr(user, key, fields[key])
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def list_user_skills(db: Session, *, user_id: int) -> list[models.UserSkill]:
    return list(
        db.scalars(
            select(models.UserSkill)
            .options(selectinload(models.UserSkill.skill))
            .where(models.UserSkill.user_id == user_id)
            .order_by(models.UserSkill.id)
        ).all()
    )


def upsert_user_skill(
    db: Session,
    *,
    user_id: int,
    skill_id: int,
    level: int,
    description: str | None = None,
) -> models.UserSkill:
    if not db.get(models.Skill, skill_id):
        raise NotFoundError("skill not found")

    holding = _find_holding(db, user_id=user_id, skill_id=skill_id)
    if holding:
        holding.level = level
        holding.description = description
    else:
        holding = models.UserSkill(user_id=user_id, skill_id=skill_id, level=level, description=description)
    db.add(holding)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        holding = _find_holding(db, user_id=user_id, skill_id=skill_id)
        if holding is None:
            raise
        holding.level = level
        holding.description = description
        db.commit()
    db.refresh(holding)
    return holding


def _find_holding(db: Session, *, user_id: int, skill_id: int) -> models.UserSkill | None:
    return db.scalar(
        select(models.UserSkill).where(
            models.UserSkill.user_id == user_id,
            models.UserSkill.skill_id == skill_id,
        )
    )


def remove_user_skill(db: Session, *, user_id: int, skill_id: int) -> int:
    deleted = db.execute(
        sa_delete(models.UserSkill).where(
            models.UserSkill.user_id == user_id,
            models.UserSkill.skill_id == skill_id,
        )
    ).rowcount or 0
    db.commit()
    return deleted


def list_skill_map(db: Session) -> list[models.User]:
    return list(
        db.scalars(
            select(models.User)
            .options(selectinload(models.User.skills).selectinload(models.UserSkill.skill))
            .order_by(models.User.id)
        ).all()
    )


def holdings_for_user(db: Session, *, user_id: int) -> list[SkillHolding]:
    rows = db.execute(
        select(models.UserSkill.skill_id, models.UserSkill.level, models.UserSkill.description)
        .where(models.UserSkill.user_id == user_id)
    ).all()
    return [SkillHolding(skill_id=skill_id, level=level, note=note) for skill_id, level, note in rows]


def holdings_by_skill_holders(db: Session, *, skill_ids: list[int]) -> dict[int, list[SkillHolding]]:
    if not skill_ids:
        return {}

    rows = db.execute(
        select(models.UserSkill.user_id, models.UserSkill.skill_id, models.UserSkill.level)
        .where(models.UserSkill.skill_id.in_(skill_ids))
    ).all()
    out: dict[int, list[SkillHolding]] = {}
    for user_id, skill_id, level in rows:
        out.setdefault(user_id, []).append(SkillHolding(skill_id=skill_id, level=level))
    return out
