from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any

from forum_bridge.config import get_settings
from forum_bridge.handlers.discourse_handler import handle_rendered_topic
from forum_bridge.services.discourse_client import DiscourseClient
from forum_bridge.services.logging_config import configure_logging


async def _run(topic_id: int, page: int | None) -> tuple[int, dict[str, Any]]:
    settings = get_settings()
    configure_logging(settings.log_level)

    client = DiscourseClient(
        settings.forum_base_url,
        retry_policy=settings.retry_policy,
        timeout_seconds=settings.http_timeout_seconds,
    )
    payload = await handle_rendered_topic(client, topic_id, page=page)

    if not payload["posts"]:
        return 2, payload
    return 0, payload


def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch a Discourse topic and print its render-ready posts as JSON.")
    parser.add_argument("--topic-id", type=int, required=True, help="Discourse topic id.")
    parser.add_argument("--page", type=int, default=-1, help="Optional topic page (Discourse pages hold 20 posts).")
    args = parser.parse_args()

    page = args.page if args.page >= 0 else None
    code, payload = asyncio.run(_run(args.topic_id, page))
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return code


if __name__ == "__main__":
    raise SystemExit(main())
