import logging
from typing import Dict

import requests

from .errors import PublishFailed
from .gh_api import GitHubClient, GitHubError
from .models import ArtifactSet, RepositoryHandle

logger = logging.getLogger(__name__)

REF_EXISTS = 422

def commit_message(brief: str) -> str:
    return f"Initial deployment: {brief[:50]}..."

def publish(client: GitHubClient, repo: RepositoryHandle, files: ArtifactSet,
            message: str, branch: str = "main") -> str:
    """Write ``files`` as a single parentless commit and point ``branch`` at it.

    Returns the commit sha. History is never continued: the branch ends up
    holding exactly ``files``.
    """
    if not files:
        raise PublishFailed("blob", "nothing to publish")

    logger.info("Pushing %d files to %s", len(files), repo.name)
    blobs: Dict[str, str] = {}
    for path, content in files.items():
        try:
            blobs[path] = client.create_blob(repo.name, content)
        except (GitHubError, requests.RequestException) as e:
            raise PublishFailed("blob", f"{path}: {e}") from e

    try:
        tree = client.create_tree(repo.name, blobs)
    except (GitHubError, requests.RequestException) as e:
        raise PublishFailed("tree", str(e)) from e

    try:
        sha = client.create_commit(repo.name, message, tree, parents=[])
    except (GitHubError, requests.RequestException) as e:
        raise PublishFailed("commit", str(e)) from e

    try:
        client.create_ref(repo.name, branch, sha)
    except GitHubError as e:
        if e.status != REF_EXISTS:
            raise PublishFailed("ref", str(e)) from e
        logger.info("refs/heads/%s already exists on %s, forcing update", branch, repo.name)
        try:
            client.update_ref(repo.name, branch, sha, force=True)
        except (GitHubError, requests.RequestException) as e2:
            raise PublishFailed("ref", str(e2)) from e2
    except requests.RequestException as e:
        raise PublishFailed("ref", str(e)) from e

    logger.info("Commit %s on %s/%s", sha, repo.name, branch)
    return sha
