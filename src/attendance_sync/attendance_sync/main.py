from __future__ import annotations

import importlib

from dotenv import load_dotenv

from config import get_settings_module

from .common.logging_utils import setup_logger
from .container import Container, build_container
from .location.provider import LocationProvider


def create_container(*, location_provider: LocationProvider | None = None) -> Container:
    """Composition root: settings from ``APP_ENV`` (+ ``.env``), logging, services."""
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logger = setup_logger(
        __package__,
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        log_file=getattr(settings, "LOG_FILE", None),
    )
    if getattr(settings, "DEBUG", False):
        logger.debug(
            "settings=%s api=%s storage=%s",
            settings_module,
            getattr(settings, "API_BASE_URL", None),
            getattr(settings, "STORAGE_PATH", None),
        )

    return build_container(settings=settings, location_provider=location_provider)
