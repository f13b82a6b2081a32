"""Filtering and sorting of a loaded repository list."""
from enum import Enum
from typing import Iterable, List, Optional
from repo_manager.domain.models import Repository


class OwnershipFilter(str, Enum):
    ALL = "all"
    OWNED = "owned"
    CONTRIBUTED = "contributed"


class SortField(str, Enum):
    NAME = "name"
    UPDATED_AT = "updated_at"
    STARGAZERS_COUNT = "stargazers_count"
    FORKS_COUNT = "forks_count"
    SIZE = "size"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _matches_search(repo: Repository, search: str) -> bool:
    term = search.lower()
    if term in repo.name.lower():
        return True
    return bool(repo.description) and term in repo.description.lower()


def _matches_ownership(repo: Repository, ownership: OwnershipFilter) -> bool:
    # Untagged records count as owned
    if ownership is OwnershipFilter.OWNED:
        return repo.is_owner is not False
    if ownership is OwnershipFilter.CONTRIBUTED:
        return repo.is_owner is False
    return True


def _sort_key(field: SortField):
    if field is SortField.NAME:
        return lambda repo: repo.name.lower()
    return lambda repo: getattr(repo, field.value)


def filter_and_sort(
    repositories: Iterable[Repository],
    search: str = "",
    language: Optional[str] = None,
    ownership: OwnershipFilter = OwnershipFilter.ALL,
    sort_field: SortField = SortField.UPDATED_AT,
    direction: SortDirection = SortDirection.DESC
) -> List[Repository]:
    """Apply the list view's search, filters and ordering.

    Args:
        repositories: Loaded repositories; not modified
        search: Case-insensitive substring of name or description
        language: Exact primary language to keep, or None for any
        ownership: Which side of the ownership tag to keep
        sort_field: Attribute to order by
        direction: Ascending or descending

    Returns:
        A new list
    """
    filtered = [
        repo for repo in repositories
        if (not search or _matches_search(repo, search))
        and (not language or repo.language == language)
        and _matches_ownership(repo, ownership)
    ]
    filtered.sort(key=_sort_key(sort_field), reverse=direction is SortDirection.DESC)
    return filtered


def available_languages(repositories: Iterable[Repository]) -> List[str]:
    """Sorted distinct primary languages, for the language filter."""
    return sorted({repo.language for repo in repositories if repo.language})
