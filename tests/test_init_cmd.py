import os

import pytest

from deployctl.app import app
from deployctl.errors import APIError

from .conftest import make_tarball

ARCHIVE = make_tarball(
    {
        "package.json": b'{"name": "nextjs"}',
        "pages/index.js": b"export default () => null",
    }
)


@pytest.fixture
def examples(platform):
    platform.examples = [
        {"name": "nextjs", "visible": True, "suggestions": ["next"]},
        {"name": "gatsby", "visible": True, "suggestions": []},
        {"name": "legacy", "visible": False, "suggestions": []},
    ]
    platform.archives["nextjs"] = ARCHIVE
    platform.archives["gatsby"] = ARCHIVE
    return platform


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    path = tmp_path / "work"
    path.mkdir()
    monkeypatch.chdir(path)
    return path


def test_too_many_arguments(runner, platform, workdir):
    result = runner.invoke(app, ["init", "a", "b", "c"])

    assert result.exit_code == 1
    assert "Too much arguments." in result.output
    assert platform.calls.call_count == 0


def test_help(runner, platform):
    result = runner.invoke(app, ["init", "--help"])

    assert result.exit_code == 2
    assert "--force" in result.output


def test_init_example(runner, examples, workdir):
    result = runner.invoke(app, ["init", "nextjs"])

    assert result.exit_code == 0, result.output
    assert 'Initialized "nextjs" example in nextjs.' in result.output
    assert (workdir / "nextjs" / "package.json").read_bytes() == b'{"name": "nextjs"}'
    assert (workdir / "nextjs" / "pages" / "index.js").exists()


def test_init_into_directory(runner, examples, workdir):
    result = runner.invoke(app, ["init", "gatsby", "site"])

    assert result.exit_code == 0, result.output
    assert (workdir / "site" / "package.json").exists()


def test_destination_exists(runner, examples, workdir):
    (workdir / "nextjs").mkdir()
    (workdir / "nextjs" / "README.md").write_text("keep")

    result = runner.invoke(app, ["init", "nextjs"])

    assert result.exit_code == 1
    assert "already exists and is not an empty directory" in str(result.exception)
    assert not (workdir / "nextjs" / "package.json").exists()


def test_destination_exists_force(runner, examples, workdir):
    (workdir / "nextjs").mkdir()
    (workdir / "nextjs" / "README.md").write_text("keep")

    result = runner.invoke(app, ["init", "nextjs", "--force"])

    assert result.exit_code == 0, result.output
    assert (workdir / "nextjs" / "package.json").exists()
    assert (workdir / "nextjs" / "README.md").read_text() == "keep"


def test_unknown_example(runner, examples, workdir):
    result = runner.invoke(app, ["init", "zzzzzz"])

    assert result.exit_code == 1
    assert "No example found for zzzzzz" in str(result.exception)


def test_hidden_example_is_not_available(runner, examples, workdir):
    result = runner.invoke(app, ["--no-prompt", "init", "legacy"])

    assert result.exit_code == 1
    assert not (workdir / "legacy").exists()


def test_suggestion_accepted(runner, examples, workdir):
    result = runner.invoke(app, ["init", "gatsbi"], input="y\n")

    assert result.exit_code == 0, result.output
    assert "Did you mean gatsby?" in result.output
    assert (workdir / "gatsby" / "package.json").exists()


def test_suggestion_declined(runner, examples, workdir):
    result = runner.invoke(app, ["init", "gatsbi"], input="n\n")

    assert result.exit_code == 1
    assert not (workdir / "gatsby").exists()


def test_suggestion_from_example_list(runner, examples, workdir):
    result = runner.invoke(app, ["--yes", "init", "next"])

    assert result.exit_code == 0, result.output
    assert (workdir / "nextjs" / "package.json").exists()


def test_choose_example_by_number(runner, examples, workdir):
    result = runner.invoke(app, ["init"], input="2\n")

    assert result.exit_code == 0, result.output
    assert "1) nextjs" in result.output
    assert "legacy" not in result.output
    assert (workdir / "gatsby" / "package.json").exists()


def test_choose_nothing(runner, examples, workdir):
    result = runner.invoke(app, ["init"], input="\n")

    assert result.exit_code == 0, result.output
    assert "No changes made." in result.output
    assert os.listdir(workdir) == []


def test_choose_without_prompt(runner, examples, workdir):
    result = runner.invoke(app, ["--no-prompt", "init"])

    assert result.exit_code == 1
    assert "No example specified" in result.output


def test_archive_escaping_destination(runner, examples, workdir):
    examples.archives["nextjs"] = make_tarball(
        {"../../evil.txt": b"evil", "ok.txt": b"ok"}
    )

    result = runner.invoke(app, ["init", "nextjs"])

    assert result.exit_code == 0, result.output
    assert (workdir / "nextjs" / "ok.txt").exists()
    assert not (workdir / "evil.txt").exists()
    assert not (workdir.parent / "evil.txt").exists()


def test_failed_download_leaves_no_directory(runner, examples, workdir):
    del examples.archives["gatsby"]

    result = runner.invoke(app, ["init", "gatsby"])

    assert result.exit_code == 1
    assert isinstance(result.exception, APIError)
    assert not (workdir / "gatsby").exists()


def test_corrupted_archive_leaves_no_directory(runner, examples, workdir):
    examples.archives["gatsby"] = b"not a tarball"

    result = runner.invoke(app, ["init", "gatsby", "site"])

    assert result.exit_code == 1
    assert "not a valid archive" in str(result.exception)
    assert not (workdir / "site").exists()
