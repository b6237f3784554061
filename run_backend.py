#!/usr/bin/env python
"""Script to run the planner API server."""
import os
from pathlib import Path

import uvicorn

from planner.config import LOG_LEVEL
from planner.logging_setup import setup_logging

if __name__ == "__main__":
    # Run from the project directory so the default SQLite file lands here.
    os.chdir(Path(__file__).resolve().parent)
    setup_logging(LOG_LEVEL)
    uvicorn.run(
        "planner.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "1") == "1",
        log_config=None,
    )
