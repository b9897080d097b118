"""
Observability setup.

Configures logfire from the process settings and sets the level of the
``genalgo`` logger hierarchy. Spans and events are only shipped when a
logfire token is available.
"""

from typing import Optional
import logging

import logfire

from src.core.config import Settings, settings as default_settings


_configured = False


def configure_observability(settings: Optional[Settings] = None, force: bool = False) -> None:
    """
    Configure logfire and the ``genalgo`` loggers once per process.

    Args:
        settings: Settings to use (defaults to the global instance)
        force: Reconfigure even if already configured
    """
    global _configured
    if _configured and not force:
        return

    settings = settings or default_settings

    logfire.configure(**settings.get_logfire_settings())
    logging.getLogger("genalgo").setLevel(getattr(logging, settings.log_level))

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        version=settings.app_version
    )
    _configured = True
