"""Configuration for middleware components.

Settings resolve from explicit values, the environment, a .env file
and defaults, in that order.

Example:
    ```python
    from http_middleware_core.config import SettingResolver

    resolver = SettingResolver()
    multiplier = resolver.resolve_float(env_var_name="HTTP_RETRY_MULTIPLIER", default=1.5)
    ```
"""

from http_middleware_core.config.exceptions import (
    ConfigError,
    InvalidSettingError,
    SettingNotFoundError,
)
from http_middleware_core.config.settings import SettingResolver

__all__ = [
    "ConfigError",
    "InvalidSettingError",
    "SettingNotFoundError",
    "SettingResolver",
]
