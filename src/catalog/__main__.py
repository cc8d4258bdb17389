"""Entry point for the catalog server."""

import uvicorn

from catalog.app import create_app
from catalog.config import Settings
from catalog.logging import configure_logging


def main() -> None:
    """Entry point for python -m catalog."""
    settings = Settings()
    configure_logging(debug=settings.debug, json_logs=settings.json_logs)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level="warning",
        access_log=False,
    )


if __name__ == "__main__":
    main()
