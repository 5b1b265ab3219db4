import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """
    stdout 핸들러 하나만 붙인다. 이미 핸들러가 있으면(uvicorn/pytest) 레벨만 맞춘다.
    """
    root = logging.getLogger()
    pkg = logging.getLogger("tasks_api")
    pkg.setLevel(level)
    if root.handlers:
        return
    root.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
