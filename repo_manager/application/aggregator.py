"""Aggregator service collecting a user's complete repository listing."""
import logging
from typing import Awaitable, Callable, Iterable, List, Set
from repo_manager.domain.errors import AggregationError, ApiError, PaginationLimitExceeded
from repo_manager.domain.github_interface import IGitHubClient
from repo_manager.domain.models import Page, Repository


logger = logging.getLogger(__name__)

PageFetcher = Callable[[int, int], Awaitable[Page]]

DEFAULT_PER_PAGE = 100
DEFAULT_MAX_PAGES = 1000


async def collect_all(
    page_fetcher: PageFetcher,
    per_page: int = DEFAULT_PER_PAGE,
    max_pages: int = DEFAULT_MAX_PAGES
) -> List[Repository]:
    """Drive a paginated listing until it returns an empty page.

    Pages are fetched strictly one after another, starting at page 1, since
    the end of the listing is only known once a page comes back empty.

    Args:
        page_fetcher: Coroutine function taking (page, per_page)
        per_page: Page size passed to every call
        max_pages: Upper bound on non-empty pages; one more fetch is made
            to see the terminating empty page

    Returns:
        All records, in the order the pages returned them

    Raises:
        PaginationLimitExceeded: When the page after max_pages is not empty
    """
    collected: List[Repository] = []
    for page in range(1, max_pages + 2):
        records = await page_fetcher(page, per_page)
        if not records:
            return collected
        if page > max_pages:
            break
        collected.extend(records)
        logger.debug(f"Page {page}: {len(records)} repositories, {len(collected)} so far")

    raise PaginationLimitExceeded(
        f"Listing did not end after {max_pages} pages of {per_page} repositories"
    )


def deduplicate(repositories: Iterable[Repository]) -> List[Repository]:
    """Keep the first occurrence of every repository id, preserving order."""
    seen: Set[int] = set()
    unique = []
    for repo in repositories:
        if repo.id in seen:
            continue
        seen.add(repo.id)
        unique.append(repo)
    return unique


def tag_ownership(repositories: Iterable[Repository], username: str) -> List[Repository]:
    """Return copies of the repositories with is_owner computed for username."""
    return [repo.with_ownership(repo.is_owned_by(username)) for repo in repositories]


class RepositoryAggregator:
    """Application service producing a user's repository list.

    Holds no state between calls; every call builds its own result from
    scratch through the GitHub client port.
    """

    def __init__(
        self,
        github_client: IGitHubClient,
        per_page: int = DEFAULT_PER_PAGE,
        max_pages: int = DEFAULT_MAX_PAGES
    ):
        """Initialize aggregator.

        Args:
            github_client: GitHub API client implementation
            per_page: Page size for listing calls
            max_pages: Safety cap on pages per listing
        """
        self._github_client = github_client
        self._per_page = per_page
        self._max_pages = max_pages

    async def _collect(self, page_fetcher: PageFetcher) -> List[Repository]:
        try:
            return await collect_all(page_fetcher, self._per_page, self._max_pages)
        except ApiError as e:
            logger.error(f"Aggregation aborted: {e.message}")
            raise AggregationError(
                f"Failed to fetch all user repositories: {e.message}", cause=e
            ) from e

    async def get_all_user_repositories(self, username: str) -> List[Repository]:
        """Fetch every repository visible to the token, tagged for username.

        The authenticated listing already includes owned, collaborator and
        organization repositories, so it is the only source.

        Args:
            username: User the ownership flag is computed against

        Returns:
            Deduplicated repositories, most recently updated first

        Raises:
            AggregationError: When any page fails; nothing partial is returned
        """
        repositories = await self._collect(
            self._github_client.fetch_visible_repositories_page
        )
        self._log_breakdown(repositories, username)

        unique = deduplicate(repositories)
        logger.info(f"Unique repositories after deduplication: {len(unique)}")

        return tag_ownership(unique, username)

    async def get_owned_repositories(self, username: str) -> List[Repository]:
        """Fetch the repositories listed under username's own account.

        Raises:
            AggregationError: When any page fails
        """

        async def fetch_page(page: int, per_page: int) -> Page:
            return await self._github_client.fetch_repositories_page(username, page, per_page)

        repositories = deduplicate(await self._collect(fetch_page))
        logger.info(f"Repositories listed for {username}: {len(repositories)}")
        return tag_ownership(repositories, username)

    @staticmethod
    def _log_breakdown(repositories: List[Repository], username: str) -> None:
        owned = [repo for repo in repositories if repo.is_owned_by(username)]
        private = [repo for repo in repositories if repo.private]
        owned_private = [repo for repo in owned if repo.private]

        logger.info(f"Total repositories fetched: {len(repositories)}")
        logger.info(f"Owned repositories: {len(owned)}")
        logger.info(f"Contributed repositories: {len(repositories) - len(owned)}")
        logger.info(f"Private repositories: {len(private)}")
        logger.info(f"Owned private repositories: {len(owned_private)}")
