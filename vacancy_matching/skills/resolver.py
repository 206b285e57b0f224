"""Skill taxonomy lookups feeding the matcher's synonym table.

The ``skills`` / ``skill_aliases`` tables extend the synonym file shipped with
the matcher, so recruiters can teach the engine new aliases without a deploy.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from vacancy_matching.matching.config import SynonymTable
from vacancy_matching.models.enums import ReviewStatusEnum
from vacancy_matching.models.skills import Skill, SkillAlias

logger = logging.getLogger(__name__)


def load_alias_map(session: Session) -> dict[str, str]:
    """Load mapping of alias name -> canonical skill name for approved, active skills."""
    rows = session.execute(
        select(SkillAlias.alias, Skill.name)
        .join(Skill, SkillAlias.skill_id == Skill.id)
        .where(Skill.is_active.is_(True), Skill.review_status == ReviewStatusEnum.APPROVED)
    ).all()
    return {alias: canonical for alias, canonical in rows}


def synonym_table_with_aliases(session: Session, base: SynonymTable) -> SynonymTable:
    """Return ``base`` extended with every alias stored in the database."""
    alias_map = load_alias_map(session)
    if not alias_map:
        return base
    logger.info("Merging %d skill aliases into the synonym table", len(alias_map))
    return base.merged_with_aliases(alias_map)
