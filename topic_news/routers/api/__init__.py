"""API routers for topic news.

This module exports a combined router that includes:

- topic_news: aggregated articles and synthesis jobs
- topic_suggest: LLM-proposed feeds filtered by validation
"""

from fastapi import APIRouter

from topic_news.routers.api import topic_news, topic_suggest

router = APIRouter(responses={404: {"description": "Not found"}})

router.include_router(topic_news.router)
router.include_router(topic_suggest.router)

__all__ = ["router"]
