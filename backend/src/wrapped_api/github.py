from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional, Tuple

import httpx
from pydantic import TypeAdapter

from .config import Settings
from .schemas import GitHubEvent, GitHubProfile, GitHubRepository

log = logging.getLogger(__name__)

PAGE_SIZE = 100

_repos_adapter = TypeAdapter(List[GitHubRepository])
_events_adapter = TypeAdapter(List[GitHubEvent])


class GitHubFetchError(RuntimeError):
    """Any upstream failure: transport, non-2xx status, or an unexpected payload."""


def _auth_headers(token: Optional[str]) -> Dict[str, str]:
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return ``<token>`` from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) < 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


async def _get_json(client: httpx.AsyncClient, path: str, params: Optional[Dict[str, Any]], token: Optional[str]) -> Any:
    resp = await client.get(path, params=params, headers=_auth_headers(token))
    resp.raise_for_status()
    return resp.json()


async def _gather_or_cancel(*aws: Awaitable[Any]) -> List[Any]:
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for t in tasks:
            t.cancel()
        raise


def _repos_request(username: str, user_token: Optional[str]) -> Tuple[str, Dict[str, Any], Optional[str]]:
    """Pick the repository listing for this request.

    A caller token lists the token owner's repos, private ones included. The
    server token is never used here, so the operator's private repos cannot
    appear in someone else's report.
    """
    if user_token:
        return "/user/repos", {"per_page": PAGE_SIZE, "sort": "updated", "type": "all"}, user_token
    return f"/users/{username}/repos", {"per_page": PAGE_SIZE, "sort": "updated"}, None


async def fetch_user_data(
    username: str, user_token: Optional[str], settings: Settings
) -> Tuple[GitHubProfile, List[GitHubRepository], List[GitHubEvent]]:
    """Fetch profile, repositories and recent events concurrently.

    All three must succeed; the first failure cancels the others and is raised
    as ``GitHubFetchError``.
    """
    token = user_token or settings.github_token
    repos_path, repos_params, repos_token = _repos_request(username, user_token)

    try:
        async with httpx.AsyncClient(base_url=settings.github_api_url, timeout=settings.github_timeout) as client:
            profile_raw, repos_raw, events_raw = await _gather_or_cancel(
                _get_json(client, f"/users/{username}", None, token),
                _get_json(client, repos_path, repos_params, repos_token),
                _get_json(client, f"/users/{username}/events", {"per_page": PAGE_SIZE}, token),
            )
        profile = GitHubProfile.model_validate(profile_raw)
        repos = _repos_adapter.validate_python(repos_raw)
        events = _events_adapter.validate_python(events_raw)
    except (httpx.HTTPError, ValueError) as e:
        # pydantic.ValidationError and JSON decode errors are both ValueErrors
        raise GitHubFetchError(f"GitHub fetch failed for {username}: {e}") from e

    log.debug("Fetched %s: %d repos, %d events", username, len(repos), len(events))
    return profile, repos, events
