"""Flask application factory."""

from __future__ import annotations

import logging
from collections.abc import Callable

from flask import Flask

from tubehub.core.config import BaseConfig, get_config
from tubehub.core.logger import configure_logging

log = logging.getLogger(__name__)


def _initializers() -> list[Callable[[Flask], None]]:
    """Setup steps in the order they must run.

    Proxy handling comes before anything that reads the request scheme
    (``Secure`` cookies); error handlers come last so they cover every
    blueprint.
    """
    from tubehub.api import init_app as api
    from tubehub.core import cors, errors, extensions, proxy
    from tubehub.core.logger import init_app as request_logging

    return [
        proxy.init_app,
        extensions.init_app,
        request_logging,
        cors.init_app,
        api,
        errors.init_app,
    ]


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build the app from ``config`` (``APP_ENV`` when omitted).

    :raises RuntimeError: If the token secrets are missing or unusable.
    """
    app = Flask(__name__, instance_relative_config=instance_relative_config)
    app.config.from_object(config if config is not None else get_config())
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    for init in _initializers():
        init(app)

    log.debug("Application ready")
    return app
