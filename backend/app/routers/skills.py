from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app import models
from app.db import get_db
from app.schemas import SkillCategoryOut, SkillCreateIn, SkillDetailOut, SkillHolderOut, SkillOut
from app.security import get_current_user
from app.services.matcher import NotFoundError
from app.services.skill_service import (
    create_skill,
    get_skill,
    list_categories,
    list_holders,
    list_skills,
    search_skills,
)

router = APIRouter(prefix="/skills", tags=["skills"])


@router.get("", response_model=list[SkillOut])
def get_skills(db: Session = Depends(get_db)) -> list[SkillOut]:
    return [_to_skill_out(skill) for skill in list_skills(db)]


@router.get("/categories", response_model=list[SkillCategoryOut])
def get_categories(db: Session = Depends(get_db)) -> list[SkillCategoryOut]:
    return [
        SkillCategoryOut(category=category, skills=[_to_skill_out(skill) for skill in skills])
        for category, skills in list_categories(db)
    ]


@router.get("/search/{term}", response_model=list[SkillOut])
def get_search(term: str, db: Session = Depends(get_db)) -> list[SkillOut]:
    return [_to_skill_out(skill) for skill in search_skills(db, term=term)]


@router.get("/{skill_id}", response_model=SkillDetailOut)
def get_skill_detail(skill_id: int, db: Session = Depends(get_db)) -> SkillDetailOut:
    try:
        skill = get_skill(db, skill_id=skill_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail="Skill not found") from exc

    return SkillDetailOut(
        id=skill.id,
        name=skill.name,
        category=skill.category,
        description=skill.description,
        users=[
            SkillHolderOut(id=user.id, name=user.name, department=user.department, grade=user.grade, level=level)
            for user, level in list_holders(db, skill_id=skill.id)
        ],
    )


@router.post("", response_model=SkillOut, status_code=status.HTTP_201_CREATED)
def post_skill(
    payload: SkillCreateIn,
    _user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SkillOut:
    try:
        skill = create_skill(db, name=payload.name, category=payload.category, description=payload.description)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _to_skill_out(skill)


def _to_skill_out(skill: models.Skill) -> SkillOut:
    return SkillOut(id=skill.id, name=skill.name, category=skill.category, description=skill.description)
