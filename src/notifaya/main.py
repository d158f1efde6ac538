"""Application entry point for the Notifaya server."""

from __future__ import annotations

import uvicorn

from notifaya.config.settings import AppConfig


def main() -> None:
    """Start the Notifaya server."""
    config = AppConfig()
    uvicorn.run(
        "notifaya.api.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        reload=config.server.reload,
        log_level="debug" if config.debug else "info",
    )


if __name__ == "__main__":
    main()
