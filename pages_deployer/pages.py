import logging

import requests

from .errors import ActivationFailed
from .gh_api import GitHubClient, GitHubError
from .models import RepositoryHandle

logger = logging.getLogger(__name__)

ALREADY_ENABLED = 409

def activate(client: GitHubClient, repo: RepositoryHandle, branch: str = "main", path: str = "/") -> None:
    """Turn on GitHub Pages for ``branch``.

    "Already enabled" counts as success. Anything else raises ActivationFailed,
    which callers log and move past: the commit is already in the repository.
    """
    logger.info("Enabling GitHub Pages for %s (%s:%s)", repo.name, branch, path)
    try:
        client.enable_pages(repo.name, branch, path)
    except GitHubError as e:
        if e.status == ALREADY_ENABLED:
            logger.info("Pages already enabled for %s", repo.name)
            return
        raise ActivationFailed(f"enabling Pages failed for {repo.name}: {e}") from e
    except requests.RequestException as e:
        raise ActivationFailed(f"enabling Pages failed for {repo.name}: {e}") from e
