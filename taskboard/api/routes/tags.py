from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.procedures import ProcedureRouter
from taskboard.repositories.tag import TagRepository
from taskboard.schemas.common import IdInput
from taskboard.schemas.relations import TagDetail, TaskDetail
from taskboard.schemas.tag import TagCreate, TagRead, TagTasksFilter, TagUpdate

router = ProcedureRouter("tag")


# PUBLIC_INTERFACE
@router.query("getTags", output=List[TagDetail])
async def get_tags(session: AsyncSession, _: None):
    return await TagRepository(session).list_tags()


# PUBLIC_INTERFACE
@router.query("getTagById", input=IdInput, output=TagDetail)
async def get_tag_by_id(session: AsyncSession, payload: IdInput):
    return await TagRepository(session).get_tag(payload.id)


# PUBLIC_INTERFACE
@router.mutation("createTag", input=TagCreate, output=TagDetail)
async def create_tag(session: AsyncSession, payload: TagCreate):
    return await TagRepository(session).create_tag(payload)


# PUBLIC_INTERFACE
@router.mutation("updateTag", input=TagUpdate, output=TagDetail)
async def update_tag(session: AsyncSession, payload: TagUpdate):
    return await TagRepository(session).update_tag(payload)


# PUBLIC_INTERFACE
@router.mutation("deleteTag", input=IdInput, output=TagRead)
async def delete_tag(session: AsyncSession, payload: IdInput):
    """Delete a tag; it is removed from every task carrying it."""
    return await TagRepository(session).delete_tag(payload.id)


# PUBLIC_INTERFACE
@router.query("getTasksByTag", input=TagTasksFilter, output=List[TaskDetail])
async def get_tasks_by_tag(session: AsyncSession, payload: TagTasksFilter):
    return await TagRepository(session).list_tasks(payload.tag_id)
