from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from agents.citation.citation_service import enhance_citations
from common.logging import logger
from common.models import (
    CitationsPayload, CitationsResponse, DocumentPayload, FeedbackItem, FeedbackPayload,
    InsightsPayload, ParsePayload, QueryHistoryEntry, SessionSnapshot, StructuredLegalInfo,
    UserContext
)
from common.security import get_current_user, get_optional_user
from controller.feedback_controller import submit_feedback
from controller.orchestrator import AssistantSession
from model.feedback_model import get_feedback_by_query_id, get_user_feedback
from model.history_model import get_user_history
from model.structured_info_parser import parse_structured_legal_info

router = APIRouter()


@router.post("/insights", response_model=SessionSnapshot)
async def get_insights(payload: InsightsPayload, user: Optional[UserContext] = Depends(get_optional_user)):
    """Answer a legal query with applicable laws, precedents and a checklist."""
    session = AssistantSession(user)
    return await session.get_insights(payload.query, payload.use_custom_library)


@router.post("/parse", response_model=StructuredLegalInfo)
async def parse_text(payload: ParsePayload):
    """Structure free text into laws, precedents and checklist."""
    return await parse_structured_legal_info(payload.raw_text)


@router.post("/citations/enhance", response_model=CitationsResponse)
async def enhance_case_citations(payload: CitationsPayload):
    return CitationsResponse(citations=await enhance_citations(payload.case_names))


@router.post("/summarize", response_model=SessionSnapshot)
async def summarize(payload: DocumentPayload, user: Optional[UserContext] = Depends(get_optional_user)):
    """Plain-language summary of a single document."""
    session = AssistantSession(user)
    return await session.summarize(payload.document_text)


@router.post("/library/documents", response_model=SessionSnapshot)
async def add_library_document(payload: DocumentPayload, user: UserContext = Depends(get_current_user)):
    session = AssistantSession(user)
    return await session.add_to_library(payload.document_text)


@router.get("/history", response_model=List[QueryHistoryEntry])
async def get_history(user: UserContext = Depends(get_current_user)):
    """Get user's query history, newest first."""
    try:
        return await get_user_history(user.user_id)
    except Exception as e:
        logger.error("Error fetching history for %s: %s", user.user_id, e)
        raise HTTPException(status_code=500, detail="Failed to load query history") from e


@router.post("/feedback")
async def post_feedback(payload: FeedbackPayload, user: Optional[UserContext] = Depends(get_optional_user)):
    return await submit_feedback(user, payload)


@router.get("/feedback/{query_id}", response_model=List[FeedbackItem])
async def get_query_feedback(query_id: str, user: UserContext = Depends(get_current_user)):
    try:
        return await get_feedback_by_query_id(query_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail="Failed to load feedback") from e


@router.get("/user/feedback", response_model=List[FeedbackItem])
async def get_my_feedback(user: UserContext = Depends(get_current_user)):
    try:
        return await get_user_feedback(user.user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail="Failed to load feedback") from e


@router.get("/status")
async def get_status():
    """Get API status."""
    return {
        "status": "running",
        "service": "NyAI Legal Assistant API",
        "features": [
            "Applicable Laws",
            "Similar Precedents",
            "Procedural Checklist",
            "Citation Enhancement",
            "Document Simplification",
            "Custom Case Library",
            "Query History",
            "Feedback"
        ]
    }
