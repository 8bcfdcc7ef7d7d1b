import logging
import pathlib

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
NOTIFY_LOGGER = "pages_deployer.notifier"

def configure_logging(level: str = "INFO", notify_log_path: str = "") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    if notify_log_path:
        attach_notify_log(notify_log_path)

def attach_notify_log(path: str) -> None:
    """Mirror notifier lines into ``path`` so they can be read back over HTTP."""
    logger = logging.getLogger(NOTIFY_LOGGER)
    target = str(pathlib.Path(path).resolve())
    for h in logger.handlers:
        if isinstance(h, logging.FileHandler) and h.baseFilename == target:
            return
    try:
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as e:
        logging.getLogger(__name__).warning("cannot open notify log %s: %s", path, e)
        return
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

def read_notify_log(path: str) -> str:
    p = pathlib.Path(path)
    if not p.exists():
        return f"NO LOG: {path} not found\n"
    return p.read_text(encoding="utf-8", errors="replace")
