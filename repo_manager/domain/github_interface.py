"""GitHub API interface (port) for user and repository operations.

This is the anti-corruption layer that shields the domain from GitHub API specifics.
"""
from abc import ABC, abstractmethod
from repo_manager.domain.models import Page, Repository, UserProfile


class IGitHubClient(ABC):
    """Abstract interface for GitHub API operations.

    Implementations raise ``ApiError`` for every failure and never retry.
    """

    @abstractmethod
    async def fetch_user(self, username: str) -> UserProfile:
        """Fetch the public profile of a user."""
        pass

    @abstractmethod
    async def fetch_authenticated_user(self) -> UserProfile:
        """Fetch the profile of the user the access token belongs to."""
        pass

    @abstractmethod
    async def fetch_repositories_page(
        self, username: str, page: int, per_page: int
    ) -> Page:
        """Fetch one page of repositories owned by ``username``.

        Args:
            username: Account whose repositories are listed
            page: 1-based page number
            per_page: Page size

        Returns:
            Repositories sorted by most recently updated first. Empty once
            ``page`` is past the available data.
        """
        pass

    @abstractmethod
    async def fetch_visible_repositories_page(self, page: int, per_page: int) -> Page:
        """Fetch one page of repositories the access token can see.

        Same ordering and empty-page contract as ``fetch_repositories_page``.
        """
        pass

    @abstractmethod
    async def fetch_repository(self, owner: str, name: str) -> Repository:
        """Fetch a single repository."""
        pass

    @abstractmethod
    async def delete_repository(self, owner: str, name: str) -> None:
        """Permanently delete a repository."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass
