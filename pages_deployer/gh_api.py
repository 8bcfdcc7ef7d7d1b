import base64
import logging
from typing import Dict, List, Optional

import requests

from .settings import settings

logger = logging.getLogger(__name__)

FILE_MODE = "100644"

class GitHubError(Exception):
    def __init__(self, status: int, message: str):
        super().__init__(f"GitHub API {status}: {message}")
        self.status = status
        self.message = message

class GitHubClient:
    """The slice of the GitHub REST API the pipeline needs.

    Repositories live under the authenticated user; ``owner`` is used for
    every ``/repos/{owner}/{repo}`` path.
    """

    def __init__(self, token: str, owner: str, api_url: str = "https://api.github.com",
                 session: Optional[requests.Session] = None, timeout: float = 30):
        self.owner = owner
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        })

    @classmethod
    def from_settings(cls) -> "GitHubClient":
        if not settings.GITHUB_TOKEN or not settings.GITHUB_USERNAME:
            raise RuntimeError("GITHUB_TOKEN/GITHUB_USERNAME not set")
        return cls(settings.GITHUB_TOKEN, settings.GITHUB_USERNAME, settings.GITHUB_API_URL)

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> dict:
        url = f"{self.api_url}{path}"
        logger.debug("%s %s", method, url)
        r = self.session.request(method, url, json=payload, timeout=self.timeout)
        if r.status_code >= 400:
            try:
                message = r.json().get("message", r.text)
            except ValueError:
                message = r.text
            raise GitHubError(r.status_code, message)
        if r.status_code == 204 or not r.content:
            return {}
        return r.json()

    def _repo_path(self, repo: str) -> str:
        return f"/repos/{self.owner}/{repo}"

    # ---------- repositories ----------
    def create_repo(self, name: str, description: str = "Auto-generated deployment") -> dict:
        return self._request("POST", "/user/repos", {
            "name": name,
            "description": description,
            "private": False,
            "auto_init": False,
        })

    def delete_repo(self, name: str) -> None:
        self._request("DELETE", self._repo_path(name))

    # ---------- git database ----------
    def create_blob(self, repo: str, content: str) -> str:
        data = self._request("POST", f"{self._repo_path(repo)}/git/blobs", {
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "encoding": "base64",
        })
        return data["sha"]

    def create_tree(self, repo: str, blobs: Dict[str, str]) -> str:
        entries: List[dict] = [
            {"path": path, "mode": FILE_MODE, "type": "blob", "sha": sha}
            for path, sha in sorted(blobs.items())
        ]
        data = self._request("POST", f"{self._repo_path(repo)}/git/trees", {"tree": entries})
        return data["sha"]

    def create_commit(self, repo: str, message: str, tree: str, parents: List[str]) -> str:
        data = self._request("POST", f"{self._repo_path(repo)}/git/commits", {
            "message": message,
            "tree": tree,
            "parents": parents,
        })
        return data["sha"]

    def create_ref(self, repo: str, branch: str, sha: str) -> None:
        self._request("POST", f"{self._repo_path(repo)}/git/refs", {
            "ref": f"refs/heads/{branch}",
            "sha": sha,
        })

    def update_ref(self, repo: str, branch: str, sha: str, force: bool = True) -> None:
        self._request("PATCH", f"{self._repo_path(repo)}/git/refs/heads/{branch}", {
            "sha": sha,
            "force": force,
        })

    # ---------- pages ----------
    def enable_pages(self, repo: str, branch: str, path: str = "/") -> dict:
        return self._request("POST", f"{self._repo_path(repo)}/pages", {
            "source": {"branch": branch, "path": path},
        })
