import logging
from flask import Flask


def configure_logging(app: Flask) -> None:
    """Prosta konfiguracja logowania (root logger + logger aplikacji)."""
    log_level_name = app.config.get("LOG_LEVEL", "INFO")
    log_level = getattr(logging, str(log_level_name).upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    # moduły core/application logują przez logging.getLogger(__name__)
    logging.getLogger().setLevel(log_level)

    app.logger.setLevel(log_level)
    app.logger.info("Logging configured, level=%s", log_level_name)
