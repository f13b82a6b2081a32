"""Domain models representing core business entities."""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class Credentials:
    """Personal access token paired with the username it is claimed for."""
    token: str
    username: str


@dataclass(frozen=True)
class UserProfile:
    """Immutable snapshot of a GitHub user account."""
    id: int
    login: str
    avatar_url: str
    public_repos: int
    followers: int
    following: int
    created_at: datetime
    updated_at: datetime
    name: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None

    def with_public_repos(self, public_repos: int) -> 'UserProfile':
        """Returns a new UserProfile with the given public repository count."""
        return replace(self, public_repos=public_repos)


@dataclass(frozen=True)
class Repository:
    """Immutable domain entity representing a GitHub repository.

    ``is_owner`` is never read from the API. It stays ``None`` until the
    aggregator tags the record against a target username.
    """
    id: int
    name: str
    full_name: str
    html_url: str
    clone_url: str
    ssh_url: str
    stargazers_count: int
    forks_count: int
    open_issues_count: int
    size: int
    created_at: datetime
    updated_at: datetime
    private: bool
    fork: bool
    archived: bool
    disabled: bool
    description: Optional[str] = None
    language: Optional[str] = None
    pushed_at: Optional[datetime] = None
    is_owner: Optional[bool] = None

    @property
    def owner(self) -> str:
        """Returns the owner segment of the full name."""
        return self.full_name.split("/", 1)[0]

    def is_owned_by(self, username: str) -> bool:
        """Case-insensitive comparison of the owner segment with a username."""
        return self.owner.lower() == username.lower()

    def with_ownership(self, is_owner: bool) -> 'Repository':
        """Returns a new Repository instance with the ownership flag set."""
        return replace(self, is_owner=is_owner)


# One listing call's worth of repositories; empty means no more data.
Page = List[Repository]
