"""
Run the Taxpal API with ``python -m app`` (or the ``taxpal-api`` script).
"""
from pathlib import Path

import uvicorn
from app.core.config import settings
from app.core.logging import logger


def main():
    """Serve ``app.main:app`` with uvicorn using the configured host and port."""
    reports_dir = Path(settings.reports.directory)
    reports_dir.mkdir(parents=True, exist_ok=True)

    logger.info(
        f"Starting {settings.api.title} on {settings.host}:{settings.port} "
        f"({settings.environment.value}, debug={settings.debug})"
    )
    logger.info(f"Serving reports from {reports_dir.resolve()} at {settings.reports.url_path}")

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.logging.level.lower(),
        access_log=settings.debug,
    )


if __name__ == "__main__":
    main()
