"""FastAPI application entry point."""

import uvicorn

from lingo_tutor.api.app import create_app
from lingo_tutor.config import Settings
from lingo_tutor.logging_config import configure_logging

configure_logging()

settings = Settings()

app = create_app(settings)


def main() -> None:
    """Run the application."""
    uvicorn.run(
        "lingo_tutor.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    main()
