"""Wehoware API entrypoint."""

import uvicorn

from wehoware.config.settings import get_settings


def cli() -> None:
    """Serve the API with uvicorn (auto-reload in debug)."""
    settings = get_settings()
    uvicorn.run(
        "wehoware.web.app:create_app",
        factory=True,
        host="0.0.0.0",  # nosec B104
        port=8000,
        reload=settings.debug,
    )


if __name__ == "__main__":
    cli()
