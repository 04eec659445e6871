"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from wordflight_chat.application.ports.store import DocumentStore


def get_store(conn: HTTPConnection) -> DocumentStore:
    """The process-wide document store created in the app lifespan."""
    return conn.app.state.store


StoreDep = Annotated[DocumentStore, Depends(get_store)]
