from __future__ import annotations

import pytest
from typer.testing import CliRunner

from sentry_lookup import __version__
from sentry_lookup.core import resolver
from sentry_lookup.core.schemas import Project
from sentry_lookup.runner.cli import app
from sentry_lookup.store.cache import ProjectCache

runner = CliRunner()


@pytest.fixture
def patched_client(monkeypatch: pytest.MonkeyPatch, fake_sentry):
    monkeypatch.setattr(
        resolver,
        "SentryClient",
        lambda api_url, api_key: fake_sentry.client(api_url=api_url, api_key=api_key),
    )
    return fake_sentry


def _opts(tmp_path, *extra: str) -> list[str]:
    return ["--api-key", "k", "--org", "acme", "--cache-dir", str(tmp_path), *extra]


def test_get_slug_prints_slug(tmp_path, patched_client):
    result = runner.invoke(app, _opts(tmp_path, "get-slug", "123"))

    assert result.exit_code == 0
    assert result.stdout.strip() == "my-proj"
    assert patched_client.requests[0].headers["Authorization"] == "Bearer k"


def test_connection_options_belong_to_the_app_not_the_command(tmp_path, patched_client):
    result = runner.invoke(
        app,
        ["get-slug", "123", "--api-key", "k", "--org", "acme", "--cache-dir", str(tmp_path)],
    )

    assert result.exit_code == 2
    assert "No such option" in result.output
    assert patched_client.requests == []


def test_get_slug_reads_env(monkeypatch: pytest.MonkeyPatch, tmp_path, patched_client):
    monkeypatch.setenv("SENTRY_APIKEY", "env-key")
    monkeypatch.setenv("SENTRY_ORG", "env-org")
    monkeypatch.setenv("SENTRY_URL", "https://self-hosted.example.com")
    monkeypatch.setenv("SENTRY_LOOKUP_CACHE_DIR", str(tmp_path))

    result = runner.invoke(app, ["get-slug", "456"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "other-proj"
    request = patched_client.requests[0]
    assert str(request.url) == "https://self-hosted.example.com/api/0/organizations/env-org/projects/"
    assert request.headers["Authorization"] == "Bearer env-key"


def test_missing_org_exits_before_any_request(tmp_path, patched_client):
    result = runner.invoke(
        app, ["--api-key", "k", "--cache-dir", str(tmp_path), "get-slug", "123"]
    )

    assert result.exit_code == 2
    assert "SENTRY_ORG" in result.output
    assert patched_client.requests == []
    assert not (tmp_path / "projects.json").exists()


def test_unknown_project_is_reported(tmp_path, patched_client):
    result = runner.invoke(app, _opts(tmp_path, "get-slug", "999"))

    assert result.exit_code == 1
    assert "Project not found" in result.output


def test_api_error_body_is_printed(tmp_path, patched_client):
    patched_client.status_code = 401
    patched_client.body = "invalid token"

    result = runner.invoke(app, _opts(tmp_path, "get-slug", "123"))

    assert result.exit_code == 1
    assert "Error: invalid token" in result.output
    assert not (tmp_path / "projects.json").exists()


def test_multiline_error_body_is_printed_on_one_line(tmp_path, patched_client):
    patched_client.status_code = 502
    patched_client.body = "<html>\n<body>Bad gateway</body>\n</html>"

    result = runner.invoke(app, _opts(tmp_path, "get-slug", "123"))

    assert result.exit_code == 1
    assert result.output.strip() == "Error: <html> <body>Bad gateway</body> </html>"


def test_clear_cache_forces_fetch(tmp_path, patched_client):
    ProjectCache(tmp_path / "projects.json").save([Project(id="123", slug="stale-slug")])

    cached = runner.invoke(app, _opts(tmp_path, "get-slug", "123"))
    assert cached.stdout.strip() == "stale-slug"
    assert patched_client.requests == []

    fresh = runner.invoke(app, _opts(tmp_path, "--clear-cache", "get-slug", "123"))
    assert fresh.exit_code == 0
    assert fresh.stdout.strip() == "my-proj"
    assert len(patched_client.requests) == 1


def test_list_projects_renders_table(tmp_path, patched_client):
    result = runner.invoke(app, _opts(tmp_path, "list-projects"))

    assert result.exit_code == 0
    assert "my-proj" in result.stdout
    assert "other-proj" in result.stdout


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.stdout.strip() == __version__
