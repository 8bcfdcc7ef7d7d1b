"""End-to-end deployment of one task.

Generate -> provision repo -> root commit -> enable Pages -> wait -> notify.
Runs after the task was acknowledged, so nothing here raises: failures are
logged with the task id and the stage they happened in.
"""
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from . import commits, generator, notifier, pages, provisioner
from .errors import ActivationFailed, DeliveryFailed, DeployError
from .gh_api import GitHubClient
from .models import NotificationPayload, RepositoryHandle, Task
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

class Stage(Enum):
    GENERATING = "generating"
    PROVISIONING = "provisioning"
    PUBLISHING = "publishing"
    ACTIVATING = "activating"
    AWAITING_READINESS = "awaiting_readiness"
    NOTIFYING = "notifying"
    DONE = "done"
    FAILED = "failed"

@dataclass
class PipelineResult:
    stage: Stage
    repo: Optional[RepositoryHandle] = None
    commit_sha: Optional[str] = None
    pages_active: bool = False
    delivered: bool = False
    failed_at: Optional[Stage] = None
    error: Optional[str] = None

class DeploymentPipeline:
    def __init__(
        self,
        client: GitHubClient,
        config: Settings = default_settings,
        generate: Callable[..., dict] = generator.generate_artifacts,
        notify: Callable[..., int] = notifier.notify,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.config = config
        self.generate = generate
        self.notify = notify
        self.sleep = sleep

    def _log(self, task: Task, stage: Stage, msg: str, *args, level: int = logging.INFO) -> None:
        logger.log(level, "[%s r%d %s] " + msg, task.task, task.round, stage.value, *args)

    def run(self, task: Task) -> PipelineResult:
        result = PipelineResult(stage=Stage.GENERATING)
        try:
            self._build(task, result)
            self._finish(task, result)
        except Exception as e:
            failed_at = result.stage
            result.failed_at = failed_at
            result.stage = Stage.FAILED
            result.error = str(e)
            # traceback only for errors outside the taxonomy
            self._log(task, failed_at, "failed: %s", e, level=logging.ERROR)
            if not isinstance(e, DeployError):
                logger.exception("unexpected error in task %s", task.task)
        return result

    def _build(self, task: Task, result: PipelineResult) -> None:
        cfg = self.config

        self._log(task, result.stage, "generating app")
        files = self.generate(task.brief, task.checks, task.attachments, author=self.client.owner)

        result.stage = Stage.PROVISIONING
        self._log(task, result.stage, "repo %s", task.repo_name)
        repo = provisioner.provision(self.client, task.repo_name,
                                     settle_seconds=cfg.REPO_SETTLE_SECONDS, sleep=self.sleep)
        result.repo = repo

        result.stage = Stage.PUBLISHING
        result.commit_sha = commits.publish(self.client, repo, files,
                                            commits.commit_message(task.brief),
                                            branch=cfg.DEFAULT_BRANCH)
        self._log(task, result.stage, "commit %s", result.commit_sha)

    def _finish(self, task: Task, result: PipelineResult) -> None:
        cfg = self.config
        repo = result.repo

        result.stage = Stage.ACTIVATING
        try:
            pages.activate(self.client, repo, cfg.DEFAULT_BRANCH, cfg.PAGES_BUILD_PATH)
            result.pages_active = True
        except ActivationFailed as e:
            self._log(task, result.stage, "WARN: %s", e, level=logging.WARNING)

        result.stage = Stage.AWAITING_READINESS
        self._log(task, result.stage, "waiting %ss for Pages to deploy", cfg.READINESS_DELAY_SECONDS)
        self.sleep(cfg.READINESS_DELAY_SECONDS)

        result.stage = Stage.NOTIFYING
        payload = NotificationPayload(
            email=task.email,
            task=task.task,
            round=task.round,
            nonce=task.nonce,
            repo_url=repo.repo_url,
            commit_sha=result.commit_sha,
            pages_url=repo.pages_url,
        )
        try:
            attempts = self.notify(
                payload, task.evaluation_url,
                attempts=cfg.NOTIFY_ATTEMPTS,
                base_delay=cfg.NOTIFY_BASE_DELAY_SECONDS,
                timeout=cfg.NOTIFY_TIMEOUT_SECONDS,
                sleep=self.sleep,
            )
            result.delivered = True
            self._log(task, result.stage, "notified %s after %d attempt(s)", task.evaluation_url, attempts)
        except DeliveryFailed as e:
            self._log(task, result.stage, "%s", e, level=logging.ERROR)

        result.stage = Stage.DONE
        self._log(task, result.stage, "task complete: %s", repo.pages_url)

def run_pipeline(task: Task) -> PipelineResult:
    """Background entry point used by the HTTP layer."""
    try:
        client = GitHubClient.from_settings()
    except RuntimeError as e:
        logger.error("[%s r%d] cannot start: %s", task.task, task.round, e)
        return PipelineResult(stage=Stage.FAILED, failed_at=Stage.GENERATING, error=str(e))
    return DeploymentPipeline(client).run(task)
