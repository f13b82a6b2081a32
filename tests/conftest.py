"""Shared fixtures: entity factories and in-memory port implementations."""
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
import pytest
from repo_manager.domain.credentials_interface import ICredentialStore
from repo_manager.domain.errors import ApiError
from repo_manager.domain.github_interface import IGitHubClient
from repo_manager.domain.models import Credentials, Page, Repository, UserProfile


BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def build_repo(repo_id: int, full_name: str = None, **overrides) -> Repository:
    full_name = full_name or f"alice/repo{repo_id}"
    fields = dict(
        id=repo_id,
        name=full_name.split("/", 1)[1],
        full_name=full_name,
        html_url=f"https://github.com/{full_name}",
        clone_url=f"https://github.com/{full_name}.git",
        ssh_url=f"git@github.com:{full_name}.git",
        stargazers_count=0,
        forks_count=0,
        open_issues_count=0,
        size=10,
        created_at=BASE_TIME,
        updated_at=BASE_TIME - timedelta(days=repo_id),
        private=False,
        fork=False,
        archived=False,
        disabled=False,
    )
    fields.update(overrides)
    return Repository(**fields)


def build_user(login: str = "alice", **overrides) -> UserProfile:
    fields = dict(
        id=1,
        login=login,
        avatar_url=f"https://avatars.githubusercontent.com/{login}",
        public_repos=10,
        followers=3,
        following=4,
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )
    fields.update(overrides)
    return UserProfile(**fields)


class FakeGitHubClient(IGitHubClient):
    """In-memory GitHub client serving pre-built pages.

    ``visible_pages`` and ``owned_pages`` are served in order; any page past
    the end is empty. ``failures`` maps a page number to the ApiError raised
    when that page of the visible listing is requested.
    """

    def __init__(
        self,
        visible_pages: Optional[List[Page]] = None,
        owned_pages: Optional[List[Page]] = None,
        user: Optional[UserProfile] = None,
        authenticated_user: Optional[UserProfile] = None,
        failures: Optional[Dict[int, ApiError]] = None,
        delete_error: Optional[ApiError] = None,
    ):
        self.visible_pages = visible_pages or []
        self.owned_pages = owned_pages or []
        self.user = user or build_user()
        self.authenticated_user = authenticated_user or self.user
        self.failures = failures or {}
        self.delete_error = delete_error
        self.visible_calls: List[tuple] = []
        self.owned_calls: List[tuple] = []
        self.deleted: List[tuple] = []
        self.closed = False

    @staticmethod
    def _page(pages: List[Page], page: int) -> Page:
        return list(pages[page - 1]) if page <= len(pages) else []

    async def fetch_user(self, username: str) -> UserProfile:
        return self.user

    async def fetch_authenticated_user(self) -> UserProfile:
        return self.authenticated_user

    async def fetch_repositories_page(self, username: str, page: int, per_page: int) -> Page:
        self.owned_calls.append((username, page, per_page))
        return self._page(self.owned_pages, page)

    async def fetch_visible_repositories_page(self, page: int, per_page: int) -> Page:
        self.visible_calls.append((page, per_page))
        if page in self.failures:
            raise self.failures[page]
        return self._page(self.visible_pages, page)

    async def fetch_repository(self, owner: str, name: str) -> Repository:
        for page in self.visible_pages:
            for repo in page:
                if repo.full_name == f"{owner}/{name}":
                    return repo
        raise ApiError("Failed to fetch repository: Not Found", 404)

    async def delete_repository(self, owner: str, name: str) -> None:
        if self.delete_error:
            raise self.delete_error
        self.deleted.append((owner, name))

    async def close(self) -> None:
        self.closed = True


class InMemoryCredentialStore(ICredentialStore):

    def __init__(self, credentials: Optional[Credentials] = None):
        self.credentials = credentials

    def load(self) -> Optional[Credentials]:
        return self.credentials

    def save(self, credentials: Credentials) -> None:
        self.credentials = credentials

    def clear(self) -> None:
        self.credentials = None


@pytest.fixture
def make_repo():
    return build_repo


@pytest.fixture
def make_user():
    return build_user


@pytest.fixture
def fake_client_factory():
    return FakeGitHubClient


@pytest.fixture
def credential_store():
    return InMemoryCredentialStore()
