"""
Application entry point.
"""

import logging

import sentry_sdk

from clinicops.config.settings import get_settings
from clinicops.core.app_factory import create_app
from clinicops.core.shared.logger import configure_logging

settings = get_settings()
configure_logging(level=settings.LOG_LEVEL, format_type=settings.LOG_FORMAT, log_file=settings.LOG_FILE)

logger = logging.getLogger(__name__)

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        send_default_pii=False,
        environment=settings.ENVIRONMENT,
    )

app = create_app()

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting application in {settings.ENVIRONMENT} mode")
    uvicorn.run(
        "clinicops.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
