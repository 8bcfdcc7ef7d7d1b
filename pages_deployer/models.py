import re
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Dict, List, Union

# relative path -> text content
ArtifactSet = Dict[str, str]

class Attachment(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str  # data: URIs supported

class Task(BaseModel):
    """One accepted deployment task. Lives for a single pipeline run."""
    model_config = ConfigDict(frozen=True)

    task: str
    round: int
    nonce: str
    email: str
    brief: str
    checks: List[str]
    attachments: List[Attachment] = []
    evaluation_url: str

    @property
    def repo_name(self) -> str:
        # GitHub rewrites anything else to "-" on create
        return re.sub(r"[^A-Za-z0-9._-]", "-", f"{self.task}-r{self.round}")

class TaskRequest(Task):
    secret: str
    checks: Union[str, List[str]]

    @field_validator("checks")
    @classmethod
    def normalize_checks(cls, v):
        if isinstance(v, str):
            return [v]
        return v

    def to_task(self) -> Task:
        return Task(**self.model_dump(exclude={"secret"}))

class AcceptedResponse(BaseModel):
    status: str = "accepted"
    message: str = "Processing your request"

class HealthResponse(BaseModel):
    status: str = "running"
    message: str = "API is ready to receive tasks"

class RepositoryHandle(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    owner: str
    repo_url: str

    @property
    def pages_url(self) -> str:
        return f"https://{self.owner}.github.io/{self.name}/"

class NotificationPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str
    task: str
    round: int
    nonce: str
    repo_url: str
    commit_sha: str
    pages_url: str
