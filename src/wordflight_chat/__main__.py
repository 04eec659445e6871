"""Entrypoint: python -m wordflight_chat"""
from __future__ import annotations

import uvicorn

from wordflight_chat.config import settings
from wordflight_chat.logging_config import setup_logging


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "wordflight_chat.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
