from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app import models
from app.db import get_db
from app.schemas import (
    MatchingUsersOut,
    MessageOut,
    ProjectCreateIn,
    ProjectDetailOut,
    ProjectMatchOut,
    ProjectOut,
    ProjectUpdateIn,
    SkillBriefOut,
    SkillHolderOut,
)
from app.security import get_current_user
from app.services.matcher import NotFoundError
from app.services.project_service import (
    create_project,
    delete_project,
    get_project,
    list_projects,
    list_projects_by_creator,
    match_projects_for_user,
    matching_users_for_project,
    update_project,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[ProjectOut])
def get_projects(
    q: str | None = Query(default=None, max_length=200),
    skill_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[ProjectOut]:
    return [_to_project_out(project) for project in list_projects(db, q=q, skill_id=skill_id)]


@router.get("/user/mine", response_model=list[ProjectOut])
def get_my_projects(
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ProjectOut]:
    return [_to_project_out(project) for project in list_projects_by_creator(db, creator_id=user.id)]


@router.get("/matches/me", response_model=list[ProjectMatchOut])
def get_my_matches(
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ProjectMatchOut]:
    try:
        ranked = match_projects_for_user(db, user_id=user.id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail="User not found") from exc

    return [
        ProjectMatchOut(
            **_to_project_out(project).model_dump(),
            match_score=result.match_score,
            matched_skills_count=result.matched_skill_count,
        )
        for project, result in ranked
    ]


@router.get("/{project_id}", response_model=ProjectDetailOut)
def get_project_detail(project_id: int, db: Session = Depends(get_db)) -> ProjectDetailOut:
    try:
        project = get_project(db, project_id=project_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail="Project not found") from exc

    matching_users = [
        MatchingUsersOut(
            skill_id=requirement.skill_id,
            skill_name=requirement.skill.name,
            users=[
                SkillHolderOut(
                    id=user.id,
                    name=user.name,
                    department=user.department,
                    grade=user.grade,
                    level=level,
                )
                for user, level in holders
            ],
        )
        for requirement, holders in matching_users_for_project(db, project)
    ]
    creator = project.creator
    return ProjectDetailOut(
        **_to_project_out(project).model_dump(),
        creator_department=creator.department if creator else None,
        creator_email=creator.email if creator else None,
        matching_users=matching_users,
    )


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def post_project(
    payload: ProjectCreateIn,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectOut:
    try:
        project = create_project(
            db,
            creator_id=user.id,
            title=payload.title,
            description=payload.description,
            required_skills=[(item.skill_id, item.level) for item in payload.required_skills],
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _to_project_out(project)


@router.put("/{project_id}", response_model=ProjectOut)
def put_project(
    project_id: int,
    payload: ProjectUpdateIn,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectOut:
    required_skills = None
    if payload.required_skills is not None:
        required_skills = [(item.skill_id, item.level) for item in payload.required_skills]

    try:
        project = update_project(
            db,
            project_id=project_id,
            editor_id=user.id,
            title=payload.title,
            description=payload.description,
            status=payload.status,
            required_skills=required_skills,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail="Not allowed to edit this project") from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _to_project_out(project)


@router.delete("/{project_id}", response_model=MessageOut)
def remove_project(
    project_id: int,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageOut:
    try:
        delete_project(db, project_id=project_id, user_id=user.id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail="Project not found") from exc
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail="Not allowed to delete this project") from exc
    return MessageOut(message="Project deleted")


def _to_project_out(project: models.Project) -> ProjectOut:
    return ProjectOut(
        id=project.id,
        title=project.title,
        description=project.description,
        creator_id=project.creator_id,
        creator_name=project.creator.name if project.creator else None,
        status=project.status,
        created_at=project.created_at,
        required_skills=[
            SkillBriefOut(id=item.skill.id, name=item.skill.name, category=item.skill.category, level=item.level)
            for item in project.required_skills
        ],
    )
