from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class TokenOut(BaseModel):
    token: str
    token_type: str = "bearer"


class RegisterIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    department: str | None = None
    grade: str | None = None
    bio: str | None = None


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    department: str | None = None
    grade: str | None = None
    bio: str | None = None
    created_at: datetime


class UserUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    department: str | None = None
    grade: str | None = None
    bio: str | None = None


class UserSkillIn(BaseModel):
    skill_id: int
    level: int = Field(ge=1, le=5)
    description: str | None = None


class UserSkillOut(BaseModel):
    id: int
    name: str
    category: str | None = None
    description: str | None = None
    level: int
    user_description: str | None = None


class SkillBriefOut(BaseModel):
    id: int
    name: str
    category: str | None = None
    level: int


class SkillMapUserOut(BaseModel):
    id: int
    name: str
    department: str | None = None
    grade: str | None = None
    bio: str | None = None
    skills: list[SkillBriefOut] = Field(default_factory=list)


class SkillCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    category: str = Field(min_length=1, max_length=120)
    description: str | None = None


class SkillOut(BaseModel):
    id: int
    name: str
    category: str | None = None
    description: str | None = None


class SkillHolderOut(BaseModel):
    id: int
    name: str
    department: str | None = None
    grade: str | None = None
    level: int


class SkillDetailOut(SkillOut):
    users: list[SkillHolderOut] = Field(default_factory=list)


class SkillCategoryOut(BaseModel):
    category: str | None = None
    skills: list[SkillOut] = Field(default_factory=list)


class RequiredSkillIn(BaseModel):
    skill_id: int
    level: int = Field(ge=1, le=5)


class ProjectCreateIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    required_skills: list[RequiredSkillIn] = Field(default_factory=list)


class ProjectUpdateIn(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    status: str | None = Field(default=None, max_length=32)
    required_skills: list[RequiredSkillIn] | None = None


class ProjectOut(BaseModel):
    id: int
    title: str
    description: str | None = None
    creator_id: int
    creator_name: str | None = None
    status: str
    created_at: datetime
    required_skills: list[SkillBriefOut] = Field(default_factory=list)


class ProjectMatchOut(ProjectOut):
    match_score: int
    matched_skills_count: int


class MatchingUsersOut(BaseModel):
    skill_id: int
    skill_name: str
    users: list[SkillHolderOut] = Field(default_factory=list)


class ProjectDetailOut(ProjectOut):
    creator_department: str | None = None
    creator_email: str | None = None
    matching_users: list[MatchingUsersOut] = Field(default_factory=list)


class MessageOut(BaseModel):
    message: str
