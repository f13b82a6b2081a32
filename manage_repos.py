"""Main entry point for the GitHub repository manager.

Usage:
    python manage_repos.py login --username octocat --token ghp_xxx
    python manage_repos.py list --ownership owned --sort stargazers_count
    python manage_repos.py show octocat/hello-world
    python manage_repos.py delete octocat/hello-world
    python manage_repos.py logout
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional
from repo_manager.application.aggregator import RepositoryAggregator
from repo_manager.application.listing import (
    OwnershipFilter,
    SortDirection,
    SortField,
    available_languages,
    filter_and_sort,
)
from repo_manager.application.session import DashboardService, SessionManager
from repo_manager.config import Settings, load_settings
from repo_manager.domain.errors import AggregationError, ApiError, OwnershipMismatchError
from repo_manager.domain.models import Credentials, Repository
from repo_manager.infrastructure.dotenv_credentials import DotenvCredentialStore
from repo_manager.infrastructure.github_client import GitHubRestClient


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage your GitHub repositories")
    commands = parser.add_subparsers(dest="command", required=True)

    login = commands.add_parser("login", help="Validate and store a personal access token")
    login.add_argument("--username", required=True)
    login.add_argument("--token", required=True)

    commands.add_parser("logout", help="Forget stored credentials")
    commands.add_parser("whoami", help="Show the signed-in user's profile")

    listing = commands.add_parser("list", help="List owned and contributed repositories")
    listing.add_argument("--search", default="")
    listing.add_argument("--language")
    listing.add_argument(
        "--ownership", choices=[o.value for o in OwnershipFilter], default=OwnershipFilter.ALL.value
    )
    listing.add_argument(
        "--sort", choices=[f.value for f in SortField], default=SortField.UPDATED_AT.value
    )
    listing.add_argument(
        "--order", choices=[d.value for d in SortDirection], default=SortDirection.DESC.value
    )

    show = commands.add_parser("show", help="Show details for one repository")
    show.add_argument("repository", help="OWNER/NAME")

    delete = commands.add_parser("delete", help="Permanently delete a repository")
    delete.add_argument("repository", help="OWNER/NAME")
    delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    return parser


def split_full_name(full_name: str) -> List[str]:
    parts = full_name.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Expected OWNER/NAME, got {full_name!r}")
    return parts


def format_repository_line(repo: Repository) -> str:
    role = "owner" if repo.is_owner else "contributor"
    flags = [flag for flag, on in (
        ("private", repo.private), ("fork", repo.fork), ("archived", repo.archived)
    ) if on]
    language = repo.language or "-"
    suffix = f" [{', '.join(flags)}]" if flags else ""
    return (
        f"{repo.full_name:<50} {role:<11} {language:<12} "
        f"★{repo.stargazers_count:<6} {repo.updated_at:%Y-%m-%d}{suffix}"
    )


def print_repository_details(repo: Repository) -> None:
    print("=" * 60)
    print(repo.full_name)
    print("=" * 60)
    print(f"Description:  {repo.description or '-'}")
    print(f"URL:          {repo.html_url}")
    print(f"Clone (HTTPS): {repo.clone_url}")
    print(f"Clone (SSH):  {repo.ssh_url}")
    print(f"Language:     {repo.language or '-'}")
    print(f"Stars:        {repo.stargazers_count:,}")
    print(f"Forks:        {repo.forks_count:,}")
    print(f"Open issues:  {repo.open_issues_count:,}")
    print(f"Size:         {repo.size:,} KB")
    print(f"Created:      {repo.created_at:%Y-%m-%d %H:%M}")
    print(f"Updated:      {repo.updated_at:%Y-%m-%d %H:%M}")
    if repo.pushed_at:
        print(f"Last push:    {repo.pushed_at:%Y-%m-%d %H:%M}")
    print(f"Visibility:   {'private' if repo.private else 'public'}")
    print(f"Owner:        {'you' if repo.is_owner else repo.owner}")


def confirm(prompt: str) -> bool:
    answer = input(f"{prompt} [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def make_client(settings: Settings, token: str) -> GitHubRestClient:
    return GitHubRestClient(
        token,
        base_url=settings.api_url,
        timeout_seconds=settings.timeout_seconds
    )


async def run_dashboard_command(
    args: argparse.Namespace, settings: Settings, credentials: Credentials
) -> int:
    """Execute a command that needs a signed-in user."""
    client = make_client(settings, credentials.token)
    aggregator = RepositoryAggregator(client, settings.per_page, settings.max_pages)
    dashboard = DashboardService(client, credentials, aggregator=aggregator)

    try:
        if args.command == "show":
            owner, name = split_full_name(args.repository)
            print_repository_details(await dashboard.view_repository(owner, name))
            return 0

        if args.command == "delete":
            owner, name = split_full_name(args.repository)
            repo = await dashboard.view_repository(owner, name)
            if not repo.is_owner:
                logger.error(f"You do not own {repo.full_name}; refusing to delete it")
                return 1
            if not args.yes and not confirm(
                f"Permanently delete {repo.full_name}? This cannot be undone."
            ):
                print("Aborted.")
                return 1
            await dashboard.delete(repo)
            print(f"Deleted {repo.full_name}")
            return 0

        await dashboard.load()
        user = dashboard.user

        if args.command == "whoami":
            print(f"{user.login} ({user.name or 'no display name'})")
            if user.bio:
                print(user.bio)
            print(f"Public repositories: {user.public_repos}")
            print(f"Followers: {user.followers}  Following: {user.following}")
            print(f"Member since: {user.created_at:%Y-%m-%d}")
            return 0

        repos = filter_and_sort(
            dashboard.repositories,
            search=args.search,
            language=args.language,
            ownership=OwnershipFilter(args.ownership),
            sort_field=SortField(args.sort),
            direction=SortDirection(args.order),
        )
        for repo in repos:
            print(format_repository_line(repo))
        print(f"\nShowing {len(repos)} of {len(dashboard.repositories)} repositories")
        languages = available_languages(dashboard.repositories)
        if languages:
            print(f"Languages: {', '.join(languages)}")
        return 0

    finally:
        await client.close()


async def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and execute one command."""
    args = build_parser().parse_args(argv)
    settings = load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    store = DotenvCredentialStore(settings.credentials_file)
    session = SessionManager(store, lambda token: make_client(settings, token))

    try:
        if args.command == "login":
            credentials = await session.login(args.token, args.username)
            print(f"Credentials validated for {credentials.username}")
            return 0

        if args.command == "logout":
            session.logout()
            return 0

        credentials = session.restore()
        if credentials is None:
            logger.error("Not signed in. Run: python manage_repos.py login --username ... --token ...")
            return 1

        return await run_dashboard_command(args, settings, credentials)

    except OwnershipMismatchError as e:
        logger.error(f"Failed to validate credentials: {e} (token belongs to {e.actual})")
        return 1
    except (ApiError, AggregationError, ValueError) as e:
        logger.error(f"{e}")
        return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
