import os
from pydantic_settings import BaseSettings

ENV_PATH = os.path.join(os.path.dirname(__file__), ".env")

class Settings(BaseSettings):
    EXPECTED_SECRET: str = "change-me"
    GITHUB_USERNAME: str = ""
    GITHUB_TOKEN: str = ""
    GITHUB_API_URL: str = "https://api.github.com"
    DEFAULT_BRANCH: str = "main"
    PAGES_BUILD_PATH: str = "/"
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"

    # seconds to let GitHub converge after deleting a stale repo
    REPO_SETTLE_SECONDS: float = 2.0
    # fixed wait for Pages propagation before notifying
    READINESS_DELAY_SECONDS: float = 120.0

    NOTIFY_ATTEMPTS: int = 5
    NOTIFY_BASE_DELAY_SECONDS: float = 1.0
    NOTIFY_TIMEOUT_SECONDS: float = 10.0
    NOTIFY_LOG_PATH: str = "/tmp/notify.log"

    # threadpool size shared by all background pipelines
    WORKER_THREADS: int = 200

    LOG_LEVEL: str = "INFO"
    PORT: int = 7860

    class Config:
        env_file = ENV_PATH  # <- always read pages_deployer/.env

settings = Settings()
