"""Tests for the HTTP routes."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from changelog_generator.api import create_app
from changelog_generator.errors import GenerationBackendError, UpstreamFetchError
from changelog_generator.fetcher import GitHubFetcher
from changelog_generator.generator import ChangelogWriter
from changelog_generator.models import CommitRecord
from changelog_generator.pipeline import ChangelogPipeline

MANUAL_BODY = {
    "sourceType": "manual",
    "content": "- Fixed login bug\n- Added dashboard",
    "format": "markdown",
    "template": "feature",
}


@pytest.fixture
def writer():
    writer = MagicMock(spec=ChangelogWriter)
    writer.write.return_value = "## Features\n- Dashboard"
    return writer


@pytest.fixture
def fetcher():
    return MagicMock(spec=GitHubFetcher)


@pytest.fixture
def client(settings, writer, fetcher):
    factory = lambda token: fetcher
    app = create_app(
        settings,
        pipeline=ChangelogPipeline(writer, fetcher_factory=factory),
        fetcher_factory=factory,
    )
    return TestClient(app, raise_server_exceptions=False)


def as_user(user_id):
    return {"X-User-Id": user_id}


def test_generate_manual_as_guest(client):
    response = client.post("/api/changelogs/generate", json=MANUAL_BODY)

    assert response.status_code == 200
    body = response.json()
    assert body["changelog"] == "## Features\n- Dashboard"
    assert body["title"].startswith("Changelog - ")


def test_generate_github(client, fetcher, writer):
    fetcher.fetch_commits.return_value = [CommitRecord(message="fix: login", author="Ann")]
    body = {
        "sourceType": "github",
        "githubConfig": {"owner": "octocat", "repo": "hello", "fromTag": "v1.0.0", "toTag": "v1.1.0"},
        "format": "markdown",
        "template": "standard",
    }

    response = client.post("/api/changelogs/generate", json=body)

    assert response.status_code == 200
    fetcher.fetch_commits.assert_called_once_with("octocat", "hello", "v1.0.0", "v1.1.0")


def test_generate_validation_error_names_field(client, writer):
    response = client.post("/api/changelogs/generate", json={**MANUAL_BODY, "format": "pdf"})

    assert response.status_code == 400
    assert response.json()["field"] == "format"
    writer.write.assert_not_called()


def test_generate_empty_content(client):
    response = client.post("/api/changelogs/generate", json={**MANUAL_BODY, "content": "  "})

    assert response.status_code == 400
    assert response.json()["field"] == "content"


def test_generate_missing_repo_identity(client, fetcher):
    body = {"sourceType": "github", "githubConfig": {"owner": "octocat"}, "format": "html", "template": "update"}

    response = client.post("/api/changelogs/generate", json=body)

    assert response.status_code == 400
    assert response.json()["message"] == "Owner and Repo required for GitHub source"
    fetcher.fetch_commits.assert_not_called()


def test_generate_without_body(client):
    response = client.post("/api/changelogs/generate")

    assert response.status_code == 400
    assert "message" in response.json()


def test_generate_upstream_error_is_client_error(client, fetcher, writer):
    fetcher.fetch_commits.side_effect = UpstreamFetchError(404, '{"message": "Not Found"}')
    body = {"sourceType": "github", "githubConfig": {"owner": "o", "repo": "r"}, "format": "html", "template": "update"}

    response = client.post("/api/changelogs/generate", json=body)

    assert response.status_code == 400
    assert response.json()["message"].startswith("GitHub API Error:")
    assert "Not Found" in response.json()["message"]
    writer.write.assert_not_called()


def test_generate_backend_error_does_not_leak(client, writer):
    writer.write.side_effect = GenerationBackendError("401 invalid api key sk-abc")

    response = client.post("/api/changelogs/generate", json=MANUAL_BODY)

    assert response.status_code == 500
    assert response.json() == {"message": "Internal Server Error"}


def test_unexpected_error_is_internal(client, writer):
    writer.write.side_effect = RuntimeError("boom")

    response = client.post("/api/changelogs/generate", json=MANUAL_BODY)

    assert response.status_code == 500
    assert response.json() == {"message": "Internal Server Error"}


@pytest.mark.parametrize(
    "method,path",
    [("get", "/api/changelogs"), ("post", "/api/changelogs"), ("get", "/api/changelogs/1"), ("delete", "/api/changelogs/1")],
)
def test_saved_changelogs_need_a_user(client, method, path):
    response = client.request(method.upper(), path)

    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}


def test_saved_changelog_round_trip(client):
    generated = client.post("/api/changelogs/generate", json=MANUAL_BODY).json()
    save_body = {
        "title": generated["title"],
        "inputContent": MANUAL_BODY["content"],
        "outputContent": generated["changelog"],
        "sourceType": "manual",
        "settings": {"format": "markdown", "template": "feature"},
    }

    created = client.post("/api/changelogs", json=save_body, headers=as_user("u1"))
    assert created.status_code == 201
    record = created.json()
    assert record["outputContent"] == generated["changelog"]
    assert record["userId"] == "u1"

    fetched = client.get(f"/api/changelogs/{record['id']}", headers=as_user("u1"))
    assert fetched.status_code == 200
    assert fetched.json()["outputContent"] == generated["changelog"]

    listed = client.get("/api/changelogs", headers=as_user("u1"))
    assert [r["id"] for r in listed.json()] == [record["id"]]

    deleted = client.delete(f"/api/changelogs/{record['id']}", headers=as_user("u1"))
    assert deleted.status_code == 204
    assert client.get(f"/api/changelogs/{record['id']}", headers=as_user("u1")).status_code == 404


def test_other_users_changelog_is_not_found(client):
    record = client.post("/api/changelogs", json={"outputContent": "x"}, headers=as_user("u1")).json()

    assert client.get(f"/api/changelogs/{record['id']}", headers=as_user("u2")).status_code == 404
    assert client.delete(f"/api/changelogs/{record['id']}", headers=as_user("u2")).status_code == 404
    assert client.get("/api/changelogs", headers=as_user("u2")).json() == []


def test_save_validation_error(client):
    response = client.post(
        "/api/changelogs",
        json={"settings": {"format": "pdf", "template": "feature"}},
        headers=as_user("u1"),
    )

    assert response.status_code == 400
    assert response.json()["field"] == "settings.format"


def test_list_tags(client, fetcher):
    fetcher.fetch_tags.return_value = ["v1.1.0", "v1.0.0"]

    response = client.post("/api/github/tags", json={"owner": "octocat", "repo": "hello"})

    assert response.status_code == 200
    assert response.json() == ["v1.1.0", "v1.0.0"]


def test_list_tags_missing_repo(client, fetcher):
    response = client.post("/api/github/tags", json={"owner": "octocat"})

    assert response.status_code == 400
    fetcher.fetch_tags.assert_not_called()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
