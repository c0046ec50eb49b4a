import logging
from typing import Any, Awaitable

import httpx
from fastapi import FastAPI, HTTPException, Query

from forum_bridge.config import get_settings
from forum_bridge.handlers.discourse_handler import (
    CreatePostRequest,
    handle_create_post,
    handle_rendered_topic,
)
from forum_bridge.services.discourse_client import DiscourseApiError, DiscourseAuthError, DiscourseClient
from forum_bridge.services.logging_config import configure_logging

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

discourse_client = DiscourseClient(
    settings.forum_base_url,
    api_key=settings.discourse_api_key,
    api_username=settings.discourse_api_username,
    retry_policy=settings.retry_policy,
    timeout_seconds=settings.http_timeout_seconds,
)

app = FastAPI(title="Forum Bridge", version="0.1.0")


@app.on_event("startup")
def startup() -> None:
    logger.info(
        "Application startup complete",
        extra={"event": "startup_complete", "forum_base_url": settings.forum_base_url},
    )


def _upstream_error(exc: Exception, operation: str) -> HTTPException:
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        logger.warning(
            "Discourse returned an error status",
            extra={"event": "discourse_upstream_error", "operation": operation, "status_code": status},
        )
        if status == 404:
            return HTTPException(status_code=404, detail="not found on forum")
        return HTTPException(status_code=502, detail=f"forum responded with {status}")
    logger.error(
        "Discourse request failed",
        extra={"event": "discourse_request_failed", "operation": operation, "error": repr(exc)},
    )
    return HTTPException(status_code=502, detail="forum unreachable")


def _write_error_status(upstream_status: int) -> int:
    if upstream_status in (401, 403):
        return 401
    if upstream_status >= 500:
        return 502
    return 422


async def _proxy(operation: str, call: Awaitable[dict[str, Any]]) -> dict[str, Any]:
    try:
        return await call
    except (httpx.HTTPStatusError, httpx.TransportError) as exc:
        raise _upstream_error(exc, operation) from exc


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "env": settings.app_env}


@app.get("/latest")
async def latest_topics(page: int = Query(default=0, ge=0), limit: int = Query(default=20, ge=1, le=100)):
    return await _proxy("latest_topics", discourse_client.latest_topics(page, limit))


@app.get("/c/{category_slug}")
async def topics_by_category(
    category_slug: str,
    page: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
):
    return await _proxy("topics_by_category", discourse_client.topics_by_category(category_slug, page, limit))


@app.get("/t/{topic_id}")
async def topic_detail(topic_id: int, page: int | None = Query(default=None, ge=0)):
    return await _proxy("topic_detail", discourse_client.topic_detail(topic_id, page=page))


@app.get("/t/{topic_id}/rendered")
async def rendered_topic(topic_id: int, page: int | None = Query(default=None, ge=0)):
    return await _proxy("rendered_topic", handle_rendered_topic(discourse_client, topic_id, page=page))


@app.get("/search")
async def search(q: str = Query(min_length=1), page: int = Query(default=0, ge=0)):
    return await _proxy("search", discourse_client.search(q, page))


@app.get("/categories")
async def categories():
    return await _proxy("categories", discourse_client.categories())


@app.get("/u/{username}")
async def user(username: str):
    return await _proxy("user", discourse_client.user(username))


@app.post("/posts")
async def create_post(request: CreatePostRequest):
    try:
        return await _proxy("create_post", handle_create_post(discourse_client, request))
    except DiscourseAuthError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except DiscourseApiError as exc:
        raise HTTPException(status_code=_write_error_status(exc.status_code), detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
