from __future__ import annotations

import pytest

from pages_deployer.commits import commit_message, publish
from pages_deployer.errors import PublishFailed
from pages_deployer.gh_api import GitHubError
from pages_deployer.models import RepositoryHandle

FILES = {
    "index.html": "<button id='submit'>Go</button>",
    "README.md": "# Quiz\n",
    "LICENSE": "MIT License\n",
}


@pytest.fixture
def repo(github) -> RepositoryHandle:
    github.repos["quiz-r1"] = {"refs": {}}
    return RepositoryHandle(name="quiz-r1", owner="octo", repo_url="https://github.com/octo/quiz-r1")


def test_publish_builds_single_root_commit(github, repo) -> None:
    sha = publish(github, repo, FILES, "Initial deployment: quiz...")

    commit = github.objects[sha]
    assert commit["parents"] == []
    assert commit["message"] == "Initial deployment: quiz..."
    assert github.repos["quiz-r1"]["refs"]["main"] == sha
    assert github.files_at("quiz-r1") == FILES
    tree = github.objects[commit["tree"]]
    assert {e["mode"] for e in tree["entries"].values()} == {"100644"}
    assert len(github.ops("create_blob")) == 3
    assert len(github.ops("create_tree")) == 1


def test_publish_force_updates_existing_branch(github, repo) -> None:
    github.repos["quiz-r1"]["refs"]["main"] = "old"
    sha = publish(github, repo, {"index.html": "v2"}, "msg", branch="main")

    assert github.ops("update_ref") == [("update_ref", "quiz-r1", "main", True)]
    assert github.repos["quiz-r1"]["refs"]["main"] == sha
    assert github.files_at("quiz-r1") == {"index.html": "v2"}


def test_publish_uses_named_branch(github, repo) -> None:
    sha = publish(github, repo, FILES, "msg", branch="gh-pages")
    assert github.repos["quiz-r1"]["refs"] == {"gh-pages": sha}


@pytest.mark.parametrize("op,step", [
    ("create_blob", "blob"),
    ("create_tree", "tree"),
    ("create_commit", "commit"),
    ("create_ref", "ref"),
])
def test_publish_reports_failing_step(github, repo, op, step) -> None:
    github.fail[op] = GitHubError(500, "Server Error")
    with pytest.raises(PublishFailed) as exc:
        publish(github, repo, FILES, "msg")
    assert exc.value.step == step
    assert "main" not in github.repos["quiz-r1"]["refs"]


def test_publish_rejects_empty_artifact_set(github, repo) -> None:
    with pytest.raises(PublishFailed):
        publish(github, repo, {}, "msg")
    assert github.calls == []


def test_commit_message_truncates_brief() -> None:
    brief = "x" * 80
    assert commit_message(brief) == "Initial deployment: " + "x" * 50 + "..."
    assert commit_message("short") == "Initial deployment: short..."
