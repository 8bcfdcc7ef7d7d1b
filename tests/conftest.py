from __future__ import annotations

import hashlib
import json
from typing import Dict, List, Optional

import pytest

from pages_deployer.gh_api import GitHubError


def _sha(kind: str, body: object) -> str:
    return hashlib.sha1(f"{kind}:{json.dumps(body, sort_keys=True)}".encode()).hexdigest()


class FakeGitHub:
    """In-memory stand-in for GitHubClient: content-addressed objects + refs."""

    def __init__(self, owner: str = "octo", existing: Optional[List[str]] = None) -> None:
        self.owner = owner
        self.repos: Dict[str, dict] = {name: {"refs": {}} for name in (existing or [])}
        self.objects: Dict[str, dict] = {}
        self.calls: List[tuple] = []
        self.fail: Dict[str, Exception] = {}
        self.pages_error: Optional[Exception] = None

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail:
            raise self.fail[op]

    def create_repo(self, name: str, description: str = "") -> dict:
        self.calls.append(("create_repo", name))
        self._maybe_fail("create_repo")
        if name in self.repos:
            raise GitHubError(422, "name already exists on this account")
        self.repos[name] = {"refs": {}}
        return {"name": name, "html_url": f"https://github.com/{self.owner}/{name}"}

    def delete_repo(self, name: str) -> None:
        self.calls.append(("delete_repo", name))
        self._maybe_fail("delete_repo")
        if name not in self.repos:
            raise GitHubError(404, "Not Found")
        del self.repos[name]

    def create_blob(self, repo: str, content: str) -> str:
        self.calls.append(("create_blob", repo))
        self._maybe_fail("create_blob")
        sha = _sha("blob", content)
        self.objects[sha] = {"type": "blob", "content": content}
        return sha

    def create_tree(self, repo: str, blobs: Dict[str, str]) -> str:
        self.calls.append(("create_tree", repo))
        self._maybe_fail("create_tree")
        entries = {path: {"sha": sha, "mode": "100644"} for path, sha in blobs.items()}
        sha = _sha("tree", entries)
        self.objects[sha] = {"type": "tree", "entries": entries}
        return sha

    def create_commit(self, repo: str, message: str, tree: str, parents: List[str]) -> str:
        self.calls.append(("create_commit", repo))
        self._maybe_fail("create_commit")
        body = {"message": message, "tree": tree, "parents": list(parents)}
        sha = _sha("commit", body)
        self.objects[sha] = dict(body, type="commit")
        return sha

    def create_ref(self, repo: str, branch: str, sha: str) -> None:
        self.calls.append(("create_ref", repo, branch))
        self._maybe_fail("create_ref")
        refs = self.repos[repo]["refs"]
        if branch in refs:
            raise GitHubError(422, "Reference already exists")
        refs[branch] = sha

    def update_ref(self, repo: str, branch: str, sha: str, force: bool = True) -> None:
        self.calls.append(("update_ref", repo, branch, force))
        self._maybe_fail("update_ref")
        self.repos[repo]["refs"][branch] = sha

    def enable_pages(self, repo: str, branch: str, path: str = "/") -> dict:
        self.calls.append(("enable_pages", repo, branch, path))
        if self.pages_error is not None:
            raise self.pages_error
        return {"html_url": f"https://{self.owner}.github.io/{repo}/"}

    # helpers for assertions
    def files_at(self, repo: str, branch: str = "main") -> Dict[str, str]:
        commit = self.objects[self.repos[repo]["refs"][branch]]
        tree = self.objects[commit["tree"]]
        return {p: self.objects[e["sha"]]["content"] for p, e in tree["entries"].items()}

    def ops(self, name: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


class Sleeper:
    def __init__(self) -> None:
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeper() -> Sleeper:
    return Sleeper()
