from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app import models

logger = logging.getLogger(__name__)


SAMPLE_SKILLS = [
    ("JavaScript", "Programming", "Language for web front-end development"),
    ("Python", "Programming", "Popular language for data analysis and machine learning"),
    ("Design Thinking", "Thinking", "A process for creative problem solving"),
    ("Graphic Design", "Design", "Techniques for visual communication"),
    ("Presentation", "Communication", "Conveying information and ideas effectively"),
]


def seed_sample_skills(db: Session) -> int:
    if db.scalar(select(func.count(models.Skill.id))):
        return 0

    for name, category, description in SAMPLE_SKILLS:
        db.add(models.Skill(name=name, category=category, description=description))
    db.commit()
    logger.info("seeded %d sample skills", len(SAMPLE_SKILLS))
    return len(SAMPLE_SKILLS)
