"""Exceptions raised while resolving configuration settings.

Example:
    ```python
    from http_middleware_core.config.exceptions import SettingNotFoundError

    if interval is None:
        raise SettingNotFoundError("Retry interval not configured", env_var_name="HTTP_RETRY_INITIAL_INTERVAL")
    ```
"""


class ConfigError(Exception):
    """Base exception for configuration errors.

    All setting-specific exceptions inherit from this class,
    making it easy to catch any configuration error.
    """

    pass


class SettingNotFoundError(ConfigError):
    """Raised when a required setting cannot be resolved from any source.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class InvalidSettingError(ConfigError):
    """Raised when a setting was found but cannot be parsed.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
        value: The raw value that failed to parse.
    """

    def __init__(self, message: str, env_var_name: str | None = None, value: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name
        self.value = value
