import logging

import sentry_sdk

from gitbig.settings import Settings


LOG_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)s | %(message)s"


def init_sentry(app_settings: Settings) -> None:
    """Initialize Sentry SDK when DSN is configured."""

    if not app_settings.sentry_dsn:
        return

    sentry_sdk.init(
        dsn=app_settings.sentry_dsn,
        environment=app_settings.environment,
        release=app_settings.release,
        traces_sample_rate=app_settings.sentry_traces_sample_rate,
        send_default_pii=False,
    )


def configure_logging(app_settings: Settings) -> logging.Logger:
    """Attach a single stream handler to the package logger."""

    logger = logging.getLogger("gitbig")
    logger.setLevel(app_settings.log_level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    return logger
