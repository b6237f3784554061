import logging
import sys


class _ThirdPartyNoiseFilter(logging.Filter):
    """
    Keep planner logs, but only let third-party records through at WARNING+.
    SQLAlchemy echo, httpx request lines and the openai client are chatty.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "planner" or record.name.startswith("planner."):
            return True
        # uvicorn access/error logs are useful when running the server.
        if record.name.startswith("uvicorn"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure a single console handler on the root logger.

    Call this ONCE, before the app starts serving.
    """
    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(ch)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
