from __future__ import annotations

import pytest
import requests

from pages_deployer.errors import ActivationFailed
from pages_deployer.gh_api import GitHubError
from pages_deployer.models import RepositoryHandle
from pages_deployer.pages import activate

REPO = RepositoryHandle(name="quiz-r1", owner="octo", repo_url="https://github.com/octo/quiz-r1")


def test_activate_enables_pages(github) -> None:
    activate(github, REPO, "main", "/")
    assert github.ops("enable_pages") == [("enable_pages", "quiz-r1", "main", "/")]


def test_activate_treats_conflict_as_success(github) -> None:
    github.pages_error = GitHubError(409, "GitHub Pages is already enabled.")
    activate(github, REPO)


def test_activate_reports_other_errors(github) -> None:
    github.pages_error = GitHubError(422, "Invalid source")
    with pytest.raises(ActivationFailed, match="enabling Pages failed"):
        activate(github, REPO)


def test_activate_reports_network_errors(github) -> None:
    github.pages_error = requests.Timeout("slow")
    with pytest.raises(ActivationFailed):
        activate(github, REPO)
