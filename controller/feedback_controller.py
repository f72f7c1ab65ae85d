from typing import Any, Dict, Optional
from pydantic import ValidationError
from common.logging import logger
from common.models import FeedbackItem, FeedbackPayload, Notice, NoticeVariant, UserContext
from model.feedback_model import save_feedback


def _notice(title: str, description: str, destructive: bool = False) -> Notice:
    variant = NoticeVariant.DESTRUCTIVE if destructive else NoticeVariant.DEFAULT
    return Notice(title=title, description=description, variant=variant)


async def submit_feedback(user: Optional[UserContext], payload: FeedbackPayload) -> Dict[str, Any]:
    """Validate and store a rating for one section of an answered query.

    Returns ``{"id": <feedback id or None>, "notices": [...]}``.
    """
    if user is None:
        return {"id": None, "notices": [_notice(
            "Authentication Required", "Please sign in to provide feedback.", destructive=True)]}

    if payload.rating is None:
        return {"id": None, "notices": [_notice(
            "Rating Required", "Please select a rating before submitting.", destructive=True)]}

    try:
        item = FeedbackItem(
            query_id=payload.query_id,
            user_id=user.user_id,
            section=payload.section,
            rating=payload.rating,
            comments=(payload.comments or "").strip() or None,
        )
    except ValidationError as e:
        logger.warning("Rejected feedback for query %s: %s", payload.query_id, e)
        return {"id": None, "notices": [_notice(
            "Invalid Rating", "Ratings must be between 1 and 5 stars.", destructive=True)]}

    try:
        feedback_id = await save_feedback(item)
    except Exception as e:
        logger.error("Error submitting feedback: %s", e)
        return {"id": None, "notices": [_notice(
            "Error", "Failed to submit feedback. Please try again.", destructive=True)]}

    logger.info("Stored %s feedback for query %s", item.section.value, item.query_id)
    return {"id": feedback_id, "notices": [_notice(
        "Feedback Submitted", "Thank you for your feedback!")]}
