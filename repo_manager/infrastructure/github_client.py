"""GitHub REST API client implementation."""
import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional, TypeVar
import aiohttp
from repo_manager.domain.errors import ApiError
from repo_manager.domain.github_interface import IGitHubClient
from repo_manager.domain.models import Page, Repository, UserProfile


logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


def _field(payload: Dict[str, Any], key: str, kind: type, optional: bool = False) -> Any:
    """Read one field from an API payload, checking its type.

    Raises:
        ValueError: When the field is missing, null (unless optional) or of the wrong type
    """
    value = payload.get(key, _MISSING)
    if value is _MISSING:
        raise ValueError(f"missing field '{key}'")
    if value is None:
        if optional:
            return None
        raise ValueError(f"field '{key}' is null")
    # bool is an int subclass; a flag where a count belongs is drift too
    if kind is int and isinstance(value, bool):
        raise ValueError(f"field '{key}' has type bool, expected int")
    if not isinstance(value, kind):
        raise ValueError(
            f"field '{key}' has type {type(value).__name__}, expected {kind.__name__}"
        )
    return value


def _timestamp(payload: Dict[str, Any], key: str, optional: bool = False) -> Optional[datetime]:
    value = _field(payload, key, str, optional=optional)
    if value is None:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def user_from_payload(payload: Dict[str, Any]) -> UserProfile:
    """Project a GitHub user payload onto the domain entity."""
    return UserProfile(
        id=_field(payload, "id", int),
        login=_field(payload, "login", str),
        avatar_url=_field(payload, "avatar_url", str),
        public_repos=_field(payload, "public_repos", int),
        followers=_field(payload, "followers", int),
        following=_field(payload, "following", int),
        created_at=_timestamp(payload, "created_at"),
        updated_at=_timestamp(payload, "updated_at"),
        name=_field(payload, "name", str, optional=True),
        email=_field(payload, "email", str, optional=True),
        bio=_field(payload, "bio", str, optional=True),
    )


def repository_from_payload(payload: Dict[str, Any]) -> Repository:
    """Project a GitHub repository payload onto the domain entity.

    Only the fields the domain knows about are read. Anything upstream sends
    under ``isOwner`` or similar is ignored.
    """
    return Repository(
        id=_field(payload, "id", int),
        name=_field(payload, "name", str),
        full_name=_field(payload, "full_name", str),
        html_url=_field(payload, "html_url", str),
        clone_url=_field(payload, "clone_url", str),
        ssh_url=_field(payload, "ssh_url", str),
        stargazers_count=_field(payload, "stargazers_count", int),
        forks_count=_field(payload, "forks_count", int),
        open_issues_count=_field(payload, "open_issues_count", int),
        size=_field(payload, "size", int),
        created_at=_timestamp(payload, "created_at"),
        updated_at=_timestamp(payload, "updated_at"),
        private=_field(payload, "private", bool),
        fork=_field(payload, "fork", bool),
        archived=_field(payload, "archived", bool),
        disabled=_field(payload, "disabled", bool),
        description=_field(payload, "description", str, optional=True),
        language=_field(payload, "language", str, optional=True),
        pushed_at=_timestamp(payload, "pushed_at", optional=True),
    )


class GitHubRestClient(IGitHubClient):
    """GitHub REST API client.

    Implements the IGitHubClient port, providing an anti-corruption layer
    between the domain and GitHub's API. Every failure surfaces as an
    ApiError on the first attempt; there is no retry.
    """

    API_URL = "https://api.github.com"
    MAX_PER_PAGE = 100  # GitHub max is 100

    def __init__(
        self,
        access_token: str,
        base_url: str = API_URL,
        timeout_seconds: float = 30.0
    ):
        """Initialize GitHub client.

        Args:
            access_token: GitHub personal access token
            base_url: REST API root, without trailing slash
            timeout_seconds: Total timeout for each request
        """
        self._access_token = access_token
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _init_session(self) -> aiohttp.ClientSession:
        """Initialize the HTTP session (lazy initialization)."""
        if self._session is None or self._session.closed:
            headers = {
                "Authorization": f"Bearer {self._access_token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "github-repo-manager",
            }
            self._session = aiohttp.ClientSession(headers=headers, timeout=self._timeout)
        return self._session

    @staticmethod
    async def _error_detail(response: aiohttp.ClientResponse) -> str:
        """Extract GitHub's error message from a failed response."""
        try:
            body = await response.json(content_type=None)
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.reason or f"HTTP {response.status}"

    async def _request(
        self,
        method: str,
        path: str,
        context: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Execute one REST call.

        Args:
            method: HTTP method
            path: Path below the API root, starting with '/'
            context: Prefix for error messages, e.g. 'Failed to fetch user'
            params: Query string parameters

        Returns:
            Decoded JSON body, or None for responses without content

        Raises:
            ApiError: On transport failure or any non-success status
        """
        session = await self._init_session()
        url = f"{self._base_url}{path}"
        logger.debug(f"{method} {path} params={params}")

        try:
            async with session.request(method, url, params=params) as response:
                if response.status >= 400:
                    detail = await self._error_detail(response)
                    logger.error(f"{method} {path} failed with {response.status}: {detail}")
                    raise ApiError(f"{context}: {detail}", response.status)

                if response.status == 204:
                    return None
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise ApiError(f"{context}: invalid JSON in response: {e}") from e

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            message = str(e) or type(e).__name__
            logger.error(f"{method} {path} failed: {message}")
            raise ApiError(f"{context}: {message}") from e

    @staticmethod
    def _project(convert: Callable[[Dict[str, Any]], T], payload: Any, context: str) -> T:
        if not isinstance(payload, dict):
            raise ApiError(f"{context}: expected a JSON object, got {type(payload).__name__}")
        try:
            return convert(payload)
        except ValueError as e:
            raise ApiError(f"{context}: unexpected payload: {e}") from e

    def _project_page(self, payload: Any, context: str) -> Page:
        if not isinstance(payload, list):
            raise ApiError(f"{context}: expected a JSON array, got {type(payload).__name__}")
        return [self._project(repository_from_payload, item, context) for item in payload]

    def _page_params(self, page: int, per_page: int) -> Dict[str, Any]:
        return {
            "page": page,
            "per_page": min(per_page, self.MAX_PER_PAGE),
            "sort": "updated",
            "direction": "desc",
        }

    async def fetch_user(self, username: str) -> UserProfile:
        context = "Failed to fetch user"
        payload = await self._request("GET", f"/users/{username}", context)
        return self._project(user_from_payload, payload, context)

    async def fetch_authenticated_user(self) -> UserProfile:
        context = "Failed to fetch authenticated user"
        payload = await self._request("GET", "/user", context)
        return self._project(user_from_payload, payload, context)

    async def fetch_repositories_page(
        self, username: str, page: int, per_page: int
    ) -> Page:
        context = "Failed to fetch repositories"
        payload = await self._request(
            "GET", f"/users/{username}/repos", context,
            params=self._page_params(page, per_page)
        )
        return self._project_page(payload, context)

    async def fetch_visible_repositories_page(self, page: int, per_page: int) -> Page:
        context = "Failed to fetch contributed repositories"
        payload = await self._request(
            "GET", "/user/repos", context,
            params=self._page_params(page, per_page)
        )
        return self._project_page(payload, context)

    async def fetch_repository(self, owner: str, name: str) -> Repository:
        context = "Failed to fetch repository"
        payload = await self._request("GET", f"/repos/{owner}/{name}", context)
        return self._project(repository_from_payload, payload, context)

    async def delete_repository(self, owner: str, name: str) -> None:
        await self._request("DELETE", f"/repos/{owner}/{name}", "Failed to delete repository")
        logger.info(f"Deleted repository {owner}/{name}")

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
