"""
ConnectGraph Server Entry Point

Run with: python main.py
Or with uvicorn: uvicorn app:app --reload

Host and port come from CONNECTGRAPH_HOST / CONNECTGRAPH_PORT; the uvicorn
log level follows CONNECTGRAPH_LOG_LEVEL.
"""

import os

import uvicorn

from connectgraph.config import Config


def run() -> None:
    config = Config.from_env()
    is_dev = os.getenv("ENVIRONMENT", "development") == "development"

    uvicorn.run(
        "app:app",
        host=os.getenv("CONNECTGRAPH_HOST", "127.0.0.1"),
        port=int(os.getenv("CONNECTGRAPH_PORT", "8000")),
        reload=is_dev,
        log_level=config.logging.level.lower(),
    )


if __name__ == "__main__":
    run()
