"""Launch script that starts the API under Uvicorn."""

from __future__ import annotations

import logging
import os

import uvicorn

logger = logging.getLogger("gazapay.launcher")


def main() -> None:
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    logger.debug("Starting GazaPay API on %s:%s", host, port)
    uvicorn.run("gazapay.main:app", host=host, port=port)


if __name__ == "__main__":
    main()
