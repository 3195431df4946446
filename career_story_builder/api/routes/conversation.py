from __future__ import annotations

from fastapi import APIRouter, Depends

from career_story_builder.api.deps import get_conversation_service
from career_story_builder.dto.conversation import ClarifyRequest, ClarifyResponse, GenerateRequest, GenerateResponse
from career_story_builder.services.conversation import ConversationService

router = APIRouter(prefix="/api/conversation", tags=["conversation"])


@router.post("/clarify", response_model=ClarifyResponse, response_model_exclude_none=True)
async def clarify(payload: ClarifyRequest, service: ConversationService = Depends(get_conversation_service)):
    return await service.clarify(payload)


@router.post("/generate", response_model=GenerateResponse, response_model_exclude_none=True)
async def generate(payload: GenerateRequest, service: ConversationService = Depends(get_conversation_service)):
    return await service.generate(payload)
