"""Application configuration.

AppConfig is a frozen dataclass. Override fields at construction time;
CLI flags override them again at run time.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(host="0.0.0.0", port=8080, log_level="debug")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False
    workers: int = 1
    reload: bool = False

    # Logging
    log_level: str = "info"

    # Limits
    max_body_size: int = 100 * 1024  # 100 KiB
