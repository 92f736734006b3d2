from __future__ import annotations

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from taskboard.db.models import Tag, Task
from taskboard.schemas.tag import TagCreate, TagUpdate
from .base import BaseRepository
from .task import TaskRepository

logger = logging.getLogger(__name__)

TAG_INCLUDE = (selectinload(Tag.tasks),)


class TagRepository(BaseRepository):
    """Repository for tags."""

    async def list_tags(self) -> List[Tag]:
        stmt = (
            select(Tag)
            .options(*TAG_INCLUDE)
            .execution_options(populate_existing=True)
            .order_by(Tag.id)
        )
        res = await self.scalars(stmt)
        return list(res)

    async def get_tag(self, tag_id: int) -> Tag:
        return await self.require(Tag, tag_id, TAG_INCLUDE)

    async def create_tag(self, payload: TagCreate) -> Tag:
        tag = Tag(name=payload.name, color=payload.color)
        await self.add(tag)
        await self.commit()
        logger.info("Created tag id=%s", tag.id)
        return await self.get_tag(tag.id)

    async def update_tag(self, payload: TagUpdate) -> Tag:
        tag = await self.require(Tag, payload.id)
        values = payload.model_dump(exclude_unset=True, exclude={"id"})
        for key, value in values.items():
            setattr(tag, key, value)
        await self.commit()
        logger.info("Updated tag id=%s fields=%s", tag.id, sorted(values))
        return await self.get_tag(tag.id)

    async def delete_tag(self, tag_id: int) -> Tag:
        """Delete a tag; it is detached from every task carrying it."""
        tag = await self.get_tag(tag_id)
        await self.delete(tag)
        await self.commit()
        logger.info("Deleted tag id=%s", tag_id)
        return tag

    async def list_tasks(self, tag_id: int) -> List[Task]:
        return await TaskRepository(self.session).list_by_tag(tag_id)
