"""FastAPI application for the pool aggregator."""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI

from aggregator import __version__
from aggregator.api.endpoints import router

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("AGGREGATOR_HOST", "0.0.0.0")
PORT = int(os.environ.get("AGGREGATOR_PORT", "8000"))
DEBUG = os.environ.get("AGGREGATOR_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="Pool Aggregator",
    description="Normalized liquidity pools from indexer and node sources",
    version=__version__,
)

app.include_router(router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def configure_logging(debug: bool = False) -> None:
    """Configure structlog for console output."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
    )


def run() -> None:
    """Run the aggregator API server.

    Configuration via environment variables:
    - AGGREGATOR_HOST: Host to bind to (default: 0.0.0.0)
    - AGGREGATOR_PORT: Port to bind to (default: 8000)
    - AGGREGATOR_DEBUG: Enable debug logging and reload mode (default: false)
    - AGGREGATOR_NODE_URL / AGGREGATOR_INDEXER_URL and the other
      AggregatorConfig variables
    """
    configure_logging(DEBUG)
    uvicorn.run(
        "aggregator.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
