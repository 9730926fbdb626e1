from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app import models
from app.db import get_db
from app.schemas import (
    LoginIn,
    MessageOut,
    RegisterIn,
    SkillBriefOut,
    SkillMapUserOut,
    TokenOut,
    UserOut,
    UserSkillIn,
    UserSkillOut,
    UserUpdateIn,
)
from app.security import create_access_token, get_current_user
from app.services.matcher import NotFoundError
from app.services.profile_service import (
    authenticate,
    list_skill_map,
    list_user_skills,
    register_user,
    remove_user_skill,
    update_profile,
    upsert_user_skill,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", response_model=TokenOut)
def register(payload: RegisterIn, db: Session = Depends(get_db)) -> TokenOut:
    try:
        user = register_user(
            db,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            department=payload.department,
            grade=payload.grade,
            bio=payload.bio,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return TokenOut(token=create_access_token(user.id))


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)) -> TokenOut:
    user = authenticate(db, email=payload.email, password=payload.password)
    if not user:
        raise HTTPException(status_code=400, detail="Invalid email or password")
    return TokenOut(token=create_access_token(user.id))


@router.get("/me", response_model=UserOut)
def get_me(user: models.User = Depends(get_current_user)) -> UserOut:
    return _to_user_out(user)


@router.put("/me", response_model=UserOut)
def put_me(
    payload: UserUpdateIn,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserOut:
    updated = update_profile(db, user, fields=payload.model_dump(exclude_unset=True))
    return _to_user_out(updated)


@router.get("/me/skills", response_model=list[UserSkillOut])
def get_my_skills(
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[UserSkillOut]:
    return [_to_user_skill_out(item) for item in list_user_skills(db, user_id=user.id)]


@router.post("/me/skills", response_model=UserSkillOut)
def post_my_skill(
    payload: UserSkillIn,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserSkillOut:
    try:
        holding = upsert_user_skill(
            db,
            user_id=user.id,
            skill_id=payload.skill_id,
            level=payload.level,
            description=payload.description,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail="Skill not found") from exc
    return _to_user_skill_out(holding)


@router.delete("/me/skills/{skill_id}", response_model=MessageOut)
def delete_my_skill(
    skill_id: int,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageOut:
    remove_user_skill(db, user_id=user.id, skill_id=skill_id)
    return MessageOut(message="Skill removed")


@router.get("/map", response_model=list[SkillMapUserOut])
def get_skill_map(db: Session = Depends(get_db)) -> list[SkillMapUserOut]:
    return [
        SkillMapUserOut(
            id=user.id,
            name=user.name,
            department=user.department,
            grade=user.grade,
            bio=user.bio,
            skills=[
                SkillBriefOut(id=item.skill.id, name=item.skill.name, category=item.skill.category, level=item.level)
                for item in user.skills
            ],
        )
        for user in list_skill_map(db)
    ]


def _to_user_out(user: models.User) -> UserOut:
    return UserOut(
        id=user.id,
        name=user.name,
        email=user.email,
        department=user.department,
        grade=user.grade,
        bio=user.bio,
        created_at=user.created_at,
    )


def _to_user_skill_out(holding: models.UserSkill) -> UserSkillOut:
    skill = holding.skill
    return UserSkillOut(
        id=skill.id,
        name=skill.name,
        category=skill.category,
        description=skill.description,
        level=holding.level,
        user_description=holding.description,
    )
