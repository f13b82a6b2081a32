"""Verify that the setup is correct before managing repositories."""
import asyncio
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from repo_manager.application.session import validate_credentials
from repo_manager.config import load_settings
from repo_manager.domain.errors import ApiError, OwnershipMismatchError
from repo_manager.infrastructure.dotenv_credentials import DotenvCredentialStore
from repo_manager.infrastructure.github_client import GitHubRestClient


def check_settings():
    """Check that settings parse."""
    print("Checking settings...")

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"❌ Invalid setting: {e}")
        return False

    print("✅ Settings loaded")
    print(f"   API URL: {settings.api_url}")
    print(f"   Page size: {settings.per_page}, max pages: {settings.max_pages}")
    print(f"   Credentials file: {settings.credentials_file}")
    return True


def check_stored_credentials():
    """Check that credentials have been stored."""
    print("\nChecking stored credentials...")

    settings = load_settings(load_env_file=False)
    credentials = DotenvCredentialStore(settings.credentials_file).load()
    if credentials is None:
        print("❌ No stored credentials. Run 'python manage_repos.py login' first.")
        return False

    print(f"✅ Credentials stored for {credentials.username}")
    print(f"   Token prefix: {credentials.token[:10]}...")
    return True


async def _validate(settings, credentials):
    client = GitHubRestClient(
        credentials.token,
        base_url=settings.api_url,
        timeout_seconds=settings.timeout_seconds
    )
    try:
        return await validate_credentials(client, credentials.token, credentials.username)
    finally:
        await client.close()


def check_github_token():
    """Verify the stored token authenticates as the stored username."""
    print("\nChecking GitHub token...")

    settings = load_settings(load_env_file=False)
    credentials = DotenvCredentialStore(settings.credentials_file).load()
    if credentials is None:
        print("❌ No token to check")
        return False

    try:
        profile = asyncio.run(_validate(settings, credentials))
    except OwnershipMismatchError as e:
        print(f"❌ Token belongs to {e.actual}, not {e.claimed}")
        return False
    except ApiError as e:
        print(f"❌ GitHub rejected the token ({e.status}): {e.message}")
        return False

    print(f"✅ Token is valid for {profile.login}")
    print(f"   Public repositories: {profile.public_repos}")
    return True


def main():
    """Run all verification checks."""
    print("=" * 60)
    print("GitHub Repository Manager - Setup Verification")
    print("=" * 60)

    checks = [
        ("Settings", check_settings),
        ("Stored Credentials", check_stored_credentials),
        ("GitHub Token", check_github_token),
    ]

    results = {}
    for name, check_func in checks:
        try:
            results[name] = check_func()
        except Exception as e:
            print(f"❌ {name} check failed with exception: {e}")
            results[name] = False

    print("\n" + "=" * 60)
    print("Verification Summary")
    print("=" * 60)

    for name, passed in results.items():
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"{status}: {name}")

    all_passed = all(results.values())

    if all_passed:
        print("\n✅ All checks passed! Ready to manage repositories.")
        print("\nNext steps:")
        print("  python manage_repos.py list")
        sys.exit(0)
    else:
        print("\n❌ Some checks failed. Please fix the issues above.")
        print("\nCommon solutions:")
        print("  - Sign in: python manage_repos.py login --username you --token ghp_...")
        print("  - Check GITHUB_API_URL if you use GitHub Enterprise")
        sys.exit(1)


if __name__ == "__main__":
    main()
