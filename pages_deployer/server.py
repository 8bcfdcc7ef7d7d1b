import json
import logging
from contextlib import asynccontextmanager

from anyio import to_thread
from fastapi import FastAPI, BackgroundTasks, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from .errors import AuthRejected
from .logs import configure_logging, read_notify_log
from .models import AcceptedResponse, HealthResponse, TaskRequest
from .pipeline import run_pipeline
from .security import require_secret
from .settings import settings

configure_logging(settings.LOG_LEVEL, settings.NOTIFY_LOG_PATH)
logger = logging.getLogger(__name__)

def configure_threadpool(limit: int) -> None:
    """Resize the threadpool that runs sync background tasks.

    Every pipeline holds one thread through its readiness and backoff sleeps,
    so this is the number of tasks that can be in flight at once; later ones
    queue until a thread frees up.
    """
    to_thread.current_default_thread_limiter().total_tokens = limit
    logger.info("background threadpool size: %d", limit)

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_threadpool(settings.WORKER_THREADS)
    yield

app = FastAPI(title="Pages Deployer", lifespan=lifespan)

@app.exception_handler(AuthRejected)
async def auth_rejected_handler(request: Request, exc: AuthRejected):
    return JSONResponse(status_code=403, content={"error": str(exc)})

@app.get("/", response_model=HealthResponse)
async def health():
    return HealthResponse()

# ---- MAIN ENDPOINT ----
@app.post("/deploy", response_model=None)
async def deploy(request: Request, background_tasks: BackgroundTasks):
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = None
    if not isinstance(body, dict):
        body = {}

    # secret first: a bad secret is 403 whatever else is wrong with the body
    try:
        require_secret(body.get("secret"))
    except AuthRejected:
        logger.warning("Invalid secret for task %s", body.get("task"))
        raise

    try:
        req = TaskRequest.model_validate(body)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e
    logger.info("Received task %s round %d", req.task, req.round)

    # sync function -> runs in the threadpool after the response is sent
    background_tasks.add_task(run_pipeline, req.to_task())
    return JSONResponse(status_code=200, content=AcceptedResponse().model_dump())

# ---- NOTIFY LOG VIEWER ----
@app.get("/_notify_log", include_in_schema=False)
async def _notify_log():
    try:
        return PlainTextResponse(read_notify_log(settings.NOTIFY_LOG_PATH))
    except OSError as e:
        return PlainTextResponse(f"ERROR reading log: {e}\n")
