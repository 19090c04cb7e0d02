"""Server runner: serves an ASGI callable with pounce.

``App.run()``, ``Responder.run()`` and ``sparrow run`` all end up here.
pounce runs the accept loop, HTTP parsing and worker event loops; the
sparrow side only supplies the ASGI callable and the bind settings.
"""

import logging

from sparrow._internal.asgi import ASGIApp
from sparrow.config import AppConfig
from sparrow.errors import ConfigurationError

logger = logging.getLogger("sparrow.server")


def run_server(
    app: ASGIApp,
    config: AppConfig,
    *,
    host: str | None = None,
    port: int | None = None,
    workers: int | None = None,
    log_level: str | None = None,
) -> None:
    """Serve *app* until the process is interrupted.

    Keyword arguments override the matching ``AppConfig`` fields.

    Raises:
        ConfigurationError: If pounce is not installed.
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError:
        msg = (
            "Serving requires the 'pounce' server. "
            "Install it with: pip install sparrow[server]"
        )
        raise ConfigurationError(msg) from None

    server_config = ServerConfig(
        host=host or config.host,
        port=port or config.port,
        workers=workers if workers is not None else config.workers,
        reload=config.reload,
        log_level=log_level or config.log_level,
    )
    logger.info("Serving on http://%s:%d", server_config.host, server_config.port)
    Server(server_config, app).run()
