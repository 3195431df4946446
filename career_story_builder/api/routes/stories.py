from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from career_story_builder.api.deps import get_story_service
from career_story_builder.domain.errors import StoryNotFound
from career_story_builder.dto.story import CreateStoryDto, StoryDto, TagCountDto, UpdateStoryDto
from career_story_builder.services.stories import StoryService, parse_story_id

router = APIRouter(prefix="/api/stories", tags=["stories"])


@router.get("", response_model=list[StoryDto], response_model_exclude_none=True)
async def list_stories(
    tag: str | None = None,
    q: str | None = None,
    service: StoryService = Depends(get_story_service),
):
    return [StoryDto.from_stored(row) for row in service.get_all(tag=tag, query=q)]


@router.get("/tags", response_model=list[TagCountDto])
async def list_tags(service: StoryService = Depends(get_story_service)):
    return [TagCountDto(tag=item.tag, count=item.count) for item in service.tags()]


@router.get("/{story_id}", response_model=StoryDto, response_model_exclude_none=True)
async def get_story(story_id: str, service: StoryService = Depends(get_story_service)):
    parsed = parse_story_id(story_id)
    row = service.get_by_id(parsed)
    if row is None:
        raise StoryNotFound(parsed)
    return StoryDto.from_stored(row)


@router.post(
    "",
    response_model=StoryDto,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_story(payload: CreateStoryDto, service: StoryService = Depends(get_story_service)):
    return StoryDto.from_stored(service.create(payload))


@router.put("/{story_id}", response_model=StoryDto, response_model_exclude_none=True)
async def update_story(
    story_id: str,
    payload: UpdateStoryDto,
    service: StoryService = Depends(get_story_service),
):
    return StoryDto.from_stored(service.update(parse_story_id(story_id), payload))


@router.delete("/{story_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_story(story_id: str, service: StoryService = Depends(get_story_service)) -> Response:
    service.delete(parse_story_id(story_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
