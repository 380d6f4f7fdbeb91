"""FastAPI application entry point for the chat proxy."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from proxy.routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Set up and tear down application-wide resources."""
    load_dotenv()

    app.state.backend_url = os.environ.get("CHAT_HOST_URL") or None
    if app.state.backend_url is None:
        logger.warning("CHAT_HOST_URL is not set; chat requests will fail")

    # No timeout: slow completions are the backend's and the host's concern
    app.state.http_client = httpx.AsyncClient(timeout=None)

    yield

    await app.state.http_client.aclose()


app = FastAPI(
    title="Chat Proxy",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(router)


def serve() -> None:
    """Start the uvicorn server using environment configuration."""
    load_dotenv()
    host = os.environ.get("PROXY_HOST", "0.0.0.0")
    port = int(os.environ.get("PROXY_PORT", "3000"))
    uvicorn.run("proxy.main:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    serve()
