"""Session and dashboard services.

``SessionManager`` owns the credential lifecycle (restore on start, login,
logout). ``DashboardService`` holds the in-memory state a front end renders:
the profile, the repository list and the selected repository.
"""
import asyncio
import logging
from typing import Callable, List, Optional
from repo_manager.application.aggregator import RepositoryAggregator
from repo_manager.domain.credentials_interface import ICredentialStore
from repo_manager.domain.errors import OwnershipMismatchError
from repo_manager.domain.github_interface import IGitHubClient
from repo_manager.domain.models import Credentials, Repository, UserProfile


logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], IGitHubClient]


async def validate_credentials(
    github_client: IGitHubClient, token: str, username: str
) -> UserProfile:
    """Check that the client's token authenticates as username.

    Args:
        github_client: Client constructed with the token under test
        token: Token being validated, checked for blankness only
        username: Claimed GitHub username

    Returns:
        Profile of the authenticated user

    Raises:
        ValueError: When token or username is blank
        ApiError: When the token is rejected or the lookup fails
        OwnershipMismatchError: When the token belongs to someone else
    """
    if not token.strip() or not username.strip():
        raise ValueError("Please enter both GitHub token and username")

    profile = await github_client.fetch_authenticated_user()
    if profile.login.lower() != username.strip().lower():
        raise OwnershipMismatchError(claimed=username.strip(), actual=profile.login)
    return profile


class SessionManager:
    """Credential lifecycle backed by a credential store."""

    def __init__(self, store: ICredentialStore, client_factory: ClientFactory):
        """Initialize session manager.

        Args:
            store: Where credentials survive between runs
            client_factory: Builds a GitHub client for a token
        """
        self._store = store
        self._client_factory = client_factory

    def restore(self) -> Optional[Credentials]:
        """Load previously saved credentials, if any."""
        credentials = self._store.load()
        if credentials:
            logger.info(f"Restored session for {credentials.username}")
        return credentials

    async def login(self, token: str, username: str) -> Credentials:
        """Validate and persist credentials.

        Nothing is stored unless validation succeeds.
        """
        token, username = token.strip(), username.strip()
        client = self._client_factory(token)
        try:
            await validate_credentials(client, token, username)
        finally:
            await client.close()

        credentials = Credentials(token=token, username=username)
        self._store.save(credentials)
        logger.info(f"Signed in as {username}")
        return credentials

    def logout(self) -> None:
        self._store.clear()
        logger.info("Signed out")


class DashboardService:
    """In-memory view state for one signed-in user.

    Nothing is cached across loads: every load replaces the profile and the
    repository list wholesale.
    """

    def __init__(
        self,
        github_client: IGitHubClient,
        credentials: Credentials,
        aggregator: Optional[RepositoryAggregator] = None
    ):
        self._github_client = github_client
        self._credentials = credentials
        self._aggregator = aggregator or RepositoryAggregator(github_client)
        self.user: Optional[UserProfile] = None
        self.repositories: List[Repository] = []
        self.selected: Optional[Repository] = None

    @property
    def username(self) -> str:
        return self._credentials.username

    async def load(self) -> None:
        """Fetch profile and repositories concurrently.

        Raises:
            ApiError: When the profile fetch fails
            AggregationError: When the repository listing fails

        State is only replaced when both succeed. When one fetch fails the
        other is cancelled rather than left running against the client.
        """
        user_task = asyncio.ensure_future(self._github_client.fetch_user(self.username))
        repositories_task = asyncio.ensure_future(
            self._aggregator.get_all_user_repositories(self.username)
        )
        tasks = [user_task, repositories_task]
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        for task in tasks:
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()

        user, repositories = user_task.result(), repositories_task.result()
        self.user = user
        self.repositories = repositories
        self.selected = None
        logger.info(f"Loaded {len(repositories)} repositories for {user.login}")

    async def refresh(self) -> None:
        await self.load()

    def find(self, repo_id: int) -> Optional[Repository]:
        return next((repo for repo in self.repositories if repo.id == repo_id), None)

    def select(self, repo_id: int) -> Repository:
        """Select a repository from the loaded list for the detail view.

        Raises:
            KeyError: When no loaded repository has that id
        """
        repo = self.find(repo_id)
        if repo is None:
            raise KeyError(repo_id)
        self.selected = repo
        return repo

    def clear_selection(self) -> None:
        self.selected = None

    async def view_repository(self, owner: str, name: str) -> Repository:
        """Fetch one repository fresh from GitHub, tagged for this user."""
        repo = await self._github_client.fetch_repository(owner, name)
        return repo.with_ownership(repo.is_owned_by(self.username))

    async def delete(self, repository: Repository) -> None:
        """Delete a repository remotely, then drop it from local state.

        The local list and profile are only touched after GitHub confirms the
        deletion; on failure the ApiError propagates and state is unchanged.
        """
        await self._github_client.delete_repository(repository.owner, repository.name)

        self.repositories = [repo for repo in self.repositories if repo.id != repository.id]
        if self.selected is not None and self.selected.id == repository.id:
            self.selected = None
        if self.user is not None:
            self.user = self.user.with_public_repos(self.user.public_repos - 1)

    def reset(self) -> None:
        """Discard everything loaded for this user."""
        self.user = None
        self.repositories = []
        self.selected = None
