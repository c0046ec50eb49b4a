import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from forum_bridge.services.retry import RetryPolicy, with_retry

logger = logging.getLogger(__name__)


class DiscourseApiError(RuntimeError):
    """Raised when Discourse rejects a write with a validation error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class DiscourseAuthError(RuntimeError):
    """Raised when a write is attempted without API credentials."""


def _first_error(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    errors = body.get("errors") if isinstance(body, dict) else None
    if isinstance(errors, list) and errors and errors[0]:
        return str(errors[0])
    return "Discourse rejected the post"


def avatar_url(avatar_template: str, size: int = 32, base_url: str = "") -> str:
    if not avatar_template:
        return ""
    path = avatar_template.replace("{size}", str(size))
    if path.startswith("http://") or path.startswith("https://"):
        return path
    if path.startswith("//"):
        return f"https:{path}"
    return f"{base_url.rstrip('/')}{path}"


def format_relative_time(date_string: str, now: datetime | None = None) -> str:
    try:
        created = datetime.fromisoformat(date_string.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return ""
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)

    current = now or datetime.now(timezone.utc)
    seconds = int((current - created).total_seconds())
    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    return created.date().isoformat()


class DiscourseClient:
    def __init__(
        self,
        base_url: str,
        *,
        api_key: str = "",
        api_username: str = "",
        retry_policy: RetryPolicy | None = None,
        timeout_seconds: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_username = api_username
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def _request(
        self,
        *,
        method: str,
        path: str,
        operation: str,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"

        async def _call() -> httpx.Response:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                return await client.request(
                    method=method,
                    url=url,
                    headers={"Accept": "application/json", **(headers or {})},
                    params=params,
                    json=json_body,
                )

        return await with_retry(
            operation=operation,
            call=_call,
            policy=self.retry_policy,
            logger=logger,
        )

    async def _get_json(self, path: str, operation: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        response = await self._request(method="GET", path=path, operation=operation, params=params)
        response.raise_for_status()
        return response.json()

    def _auth_headers(self, api_key: str | None, api_username: str | None) -> dict[str, str]:
        key = api_key or self.api_key
        username = api_username or self.api_username
        if not (key and username):
            raise DiscourseAuthError("Discourse API key and username are required to post")
        return {"Api-Key": key, "Api-Username": username}

    async def latest_topics(self, page: int = 0, limit: int = 20) -> dict[str, Any]:
        return await self._get_json("/latest.json", "discourse_latest_topics", {"page": page, "limit": limit})

    async def topics_by_category(self, category_slug: str, page: int = 0, limit: int = 20) -> dict[str, Any]:
        return await self._get_json(
            f"/c/{category_slug}.json",
            "discourse_topics_by_category",
            {"page": page, "limit": limit},
        )

    async def topic_detail(self, topic_id: int, page: int | None = None) -> dict[str, Any]:
        params = {"page": page} if page is not None else None
        return await self._get_json(f"/t/{topic_id}.json", "discourse_topic_detail", params)

    async def topic_posts(self, topic_id: int, post_ids: list[int]) -> dict[str, Any]:
        params = {"post_ids[]": [int(post_id) for post_id in post_ids]}
        return await self._get_json(f"/t/{topic_id}/posts.json", "discourse_topic_posts", params)

    async def search(self, query: str, page: int = 0) -> dict[str, Any]:
        return await self._get_json("/search.json", "discourse_search", {"q": query, "page": page})

    async def categories(self) -> dict[str, Any]:
        return await self._get_json("/categories.json", "discourse_categories")

    async def user(self, username: str) -> dict[str, Any]:
        return await self._get_json(f"/u/{username}.json", "discourse_user")

    async def _create_post(
        self,
        payload: dict[str, Any],
        *,
        operation: str,
        api_key: str | None,
        api_username: str | None,
    ) -> dict[str, Any]:
        response = await self._request(
            method="POST",
            path="/posts.json",
            operation=operation,
            headers=self._auth_headers(api_key, api_username),
            json_body={**payload, "archetype": "regular"},
        )
        if not response.is_success:
            raise DiscourseApiError(_first_error(response), response.status_code)

        created = response.json()
        logger.info(
            "Created Discourse post",
            extra={
                "event": "discourse_post_created",
                "operation": operation,
                "topic_id": created.get("topic_id"),
                "post_number": created.get("post_number"),
            },
        )
        return created

    async def create_topic(
        self,
        title: str,
        raw: str,
        category: int,
        *,
        api_key: str | None = None,
        api_username: str | None = None,
    ) -> dict[str, Any]:
        return await self._create_post(
            {"title": title, "raw": raw, "category": category},
            operation="discourse_create_topic",
            api_key=api_key,
            api_username=api_username,
        )

    async def create_reply(
        self,
        topic_id: int,
        raw: str,
        *,
        reply_to_post_number: int | None = None,
        api_key: str | None = None,
        api_username: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"topic_id": topic_id, "raw": raw}
        if reply_to_post_number:
            payload["reply_to_post_number"] = reply_to_post_number
        return await self._create_post(
            payload,
            operation="discourse_create_reply",
            api_key=api_key,
            api_username=api_username,
        )
