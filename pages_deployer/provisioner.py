import logging
import time
from typing import Callable

import requests

from .errors import ProvisioningFailed
from .gh_api import GitHubClient, GitHubError
from .models import RepositoryHandle

logger = logging.getLogger(__name__)

# GitHub answers 422 when the name is already taken on the account
ALREADY_EXISTS = 422

def _handle(client: GitHubClient, data: dict, name: str) -> RepositoryHandle:
    return RepositoryHandle(
        name=data.get("name", name),
        owner=client.owner,
        repo_url=data.get("html_url") or f"https://github.com/{client.owner}/{name}",
    )

def provision(client: GitHubClient, name: str, settle_seconds: float = 2.0,
              sleep: Callable[[float], None] = time.sleep) -> RepositoryHandle:
    """Make sure ``name`` exists as a fresh, empty, public repository.

    A stale repository with the same name is deleted and created again, once.
    Anything else that goes wrong is fatal for the task.
    """
    logger.info("Creating repo: %s/%s", client.owner, name)
    try:
        return _handle(client, client.create_repo(name), name)
    except GitHubError as e:
        if e.status != ALREADY_EXISTS:
            raise ProvisioningFailed(f"create {name}: {e}") from e
    except requests.RequestException as e:
        raise ProvisioningFailed(f"create {name}: {e}") from e

    logger.info("Repo %s exists, deleting and recreating", name)
    try:
        client.delete_repo(name)
        sleep(settle_seconds)
        return _handle(client, client.create_repo(name), name)
    except (GitHubError, requests.RequestException) as e:
        raise ProvisioningFailed(f"recreate {name}: {e}") from e
