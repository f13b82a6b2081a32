"""Tests for the command-line entry point."""
import asyncio
import pytest
import manage_repos


@pytest.fixture
def cli(tmp_path, monkeypatch, make_repo, make_user, fake_client_factory):
    """Point the CLI at a temporary credentials file and a fake GitHub."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CREDENTIALS_FILE", str(tmp_path / "creds.env"))
    client = fake_client_factory(
        visible_pages=[[make_repo(1, "alice/mine"), make_repo(2, "bob/theirs")]],
        user=make_user("alice", public_repos=1),
    )
    monkeypatch.setattr(manage_repos, "make_client", lambda settings, token: client)

    def run(*argv):
        return asyncio.run(manage_repos.main(list(argv)))

    run.client = client
    return run


def test_split_full_name():
    assert manage_repos.split_full_name("octocat/hello") == ["octocat", "hello"]


@pytest.mark.parametrize("value", ["octocat", "octocat/", "a/b/c"])
def test_split_full_name_rejects_malformed(value):
    with pytest.raises(ValueError, match="OWNER/NAME"):
        manage_repos.split_full_name(value)


def test_commands_require_login(cli):
    assert cli("list") == 1


def test_login_then_list_contributed(cli, capsys):
    assert cli("login", "--username", "alice", "--token", "ghp_test") == 0

    assert cli("list", "--ownership", "contributed") == 0

    out = capsys.readouterr().out
    assert "bob/theirs" in out
    assert "alice/mine" not in out
    assert "Showing 1 of 2 repositories" in out


def test_login_rejects_foreign_token(cli, make_user):
    cli.client.authenticated_user = make_user("mallory")

    assert cli("login", "--username", "alice", "--token", "ghp_test") == 1
    assert cli("list") == 1


def test_delete_refuses_repository_owned_by_someone_else(cli):
    cli("login", "--username", "alice", "--token", "ghp_test")

    assert cli("delete", "bob/theirs", "--yes") == 1
    assert cli.client.deleted == []


def test_delete_owned_repository(cli):
    cli("login", "--username", "alice", "--token", "ghp_test")

    assert cli("delete", "alice/mine", "--yes") == 0
    assert cli.client.deleted == [("alice", "mine")]


def test_logout_forgets_credentials(cli):
    cli("login", "--username", "alice", "--token", "ghp_test")

    assert cli("logout") == 0
    assert cli("whoami") == 1


def test_list_uses_configured_page_size(cli, monkeypatch):
    monkeypatch.setenv("GITHUB_PER_PAGE", "30")
    cli("login", "--username", "alice", "--token", "ghp_test")

    assert cli("list") == 0
    assert cli.client.visible_calls[0] == (1, 30)


def test_list_stops_at_configured_page_cap(cli, monkeypatch, make_repo):
    monkeypatch.setenv("GITHUB_MAX_PAGES", "1")
    cli.client.visible_pages = [[make_repo(1)], [make_repo(2)]]
    cli("login", "--username", "alice", "--token", "ghp_test")

    assert cli("list") == 1
    assert [page for page, _ in cli.client.visible_calls] == [1, 2]
