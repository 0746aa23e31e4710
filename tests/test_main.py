"""Tests for the command-line interface."""

from unittest.mock import patch

import pytest

from changelog_generator.errors import UpstreamFetchError
from changelog_generator.main import build_parser, main
from changelog_generator.models import CommitRecord


@pytest.fixture
def writer_cls():
    with patch("changelog_generator.main.ChangelogWriter") as cls:
        cls.return_value.write.return_value = "## Fixes\n- Login"
        yield cls


@pytest.fixture
def fetcher_cls():
    with patch("changelog_generator.main.GitHubFetcher") as cls:
        yield cls


def test_generate_manual_to_file(writer_cls, tmp_path):
    out = tmp_path / "CHANGELOG_ENTRY.md"

    main(["generate", "--content", "- Fixed login bug", "--output", str(out)])

    assert out.read_text(encoding="utf-8") == "## Fixes\n- Login"
    prompt = writer_cls.return_value.write.call_args.args[0]
    assert "- Fixed login bug" in prompt


def test_generate_reads_content_file(writer_cls, tmp_path, capsys):
    notes = tmp_path / "notes.txt"
    notes.write_text("- Added dashboard\n", encoding="utf-8")

    main(["generate", "--content-file", str(notes), "--format", "text", "--template", "update"])

    out = capsys.readouterr().out
    assert "Changelog - " in out
    assert "## Fixes\n- Login" in out
    prompt = writer_cls.return_value.write.call_args.args[0]
    assert "- Format: text" in prompt
    assert "- Added dashboard" in prompt


def test_generate_from_github_range(writer_cls, fetcher_cls):
    fetcher_cls.return_value.fetch_commits.return_value = [CommitRecord(message="fix: login", author="Ann")]

    main(["generate", "--owner", "octocat", "--repo", "hello", "--from-tag", "v1.0.0", "--to-tag", "v1.1.0"])

    fetcher_cls.return_value.fetch_commits.assert_called_once_with("octocat", "hello", "v1.0.0", "v1.1.0")
    prompt = writer_cls.return_value.write.call_args.args[0]
    assert "- fix: login (Author: Ann)" in prompt


def test_blank_content_exits_with_error(writer_cls, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "--content", "   "])

    assert excinfo.value.code == 1
    assert "Error:" in capsys.readouterr().err
    writer_cls.return_value.write.assert_not_called()


def test_github_error_exits_with_error(writer_cls, fetcher_cls):
    fetcher_cls.return_value.fetch_commits.side_effect = UpstreamFetchError(404, "Not Found")

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "--owner", "octocat", "--repo", "missing"])

    assert excinfo.value.code == 1
    writer_cls.return_value.write.assert_not_called()


def test_notes_with_repository_are_rejected(writer_cls, fetcher_cls, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "--content", "- My notes", "--owner", "octocat", "--repo", "hello"])

    assert excinfo.value.code == 1
    assert "(content)" in capsys.readouterr().err
    fetcher_cls.return_value.fetch_commits.assert_not_called()
    writer_cls.return_value.write.assert_not_called()


def test_missing_content_file_exits_with_error(writer_cls, tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "--content-file", str(tmp_path / "missing.txt")])

    assert excinfo.value.code == 1
    assert "Error:" in capsys.readouterr().err
    writer_cls.return_value.write.assert_not_called()


def test_tags_prints_names(fetcher_cls, capsys):
    fetcher_cls.return_value.fetch_tags.return_value = ["v1.1.0", "v1.0.0"]

    main(["tags", "--owner", "octocat", "--repo", "hello"])

    assert capsys.readouterr().out.split() == ["v1.1.0", "v1.0.0"]


def test_command_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
