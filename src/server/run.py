"""CLI entry point for launching the FastAPI app with uvicorn."""

import uvicorn

from .app import app
from .dependencies import config


def main() -> None:
    """Run the server."""
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
    )


if __name__ == "__main__":
    main()
