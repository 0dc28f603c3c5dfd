"""Entry point for the standalone catalog service."""

import uvicorn

from compat_catalog.config import settings
from compat_catalog.main import app


def main() -> None:
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug_mode else "info",
    )


if __name__ == "__main__":
    main()
