"""Multi-source setting resolution.

Settings such as backoff parameters can come from several places, checked
in priority order (highest first):

1. Explicitly provided value
2. Environment variable
3. .env file (python-dotenv)
4. Default value

Example:
    ```python
    from http_middleware_core.config import SettingResolver

    resolver = SettingResolver()
    max_elapsed = resolver.resolve_float(
        env_var_name="HTTP_RETRY_MAX_ELAPSED_TIME",
        default=900.0,
    )
    ```
"""

import logging
import os
from threading import Lock

from dotenv import load_dotenv

from http_middleware_core.config.exceptions import InvalidSettingError, SettingNotFoundError

logger = logging.getLogger(__name__)


class SettingResolver:
    """Resolve settings from multiple sources with priority ordering.

    The .env file is loaded at most once per resolver. python-dotenv never
    overrides variables that are already present in the environment, so the
    environment wins over the .env file.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize setting resolver.

        Args:
            dotenv_path: Path to .env file. If None, python-dotenv searches
                parent directories for one.
            load_dotenv: Whether to load the .env file at all.
        """
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for setting resolution")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Resolve a setting from multiple sources.

        Args:
            value: Explicitly provided value (highest priority).
            env_var_name: Environment variable name to check. Values from a
                loaded .env file are visible here too.
            default: Default value if not found elsewhere.
            required: If True, raise SettingNotFoundError when nothing resolves.

        Returns:
            Resolved value, or None if not found and not required.

        Raises:
            SettingNotFoundError: If required=True and no source has a value.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and env_var_name in os.environ:
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            logger.debug(f"Resolved setting from {source}: {result}")

        if required and result is None:
            error_msg = "Required setting not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise SettingNotFoundError(error_msg, env_var_name=env_var_name)

        return result

    def resolve_float(
        self,
        *,
        value: float | None = None,
        env_var_name: str | None = None,
        default: float | None = None,
        required: bool = False,
    ) -> float | None:
        """Resolve a numeric setting.

        Same priority ordering as resolve(); string values are parsed with float().

        Raises:
            SettingNotFoundError: If required=True and no source has a value.
            InvalidSettingError: If the resolved value is not a number.
        """
        if value is not None:
            return float(value)

        raw = self.resolve(env_var_name=env_var_name, required=required and default is None)
        if raw is None:
            return default

        try:
            return float(raw)
        except ValueError:
            raise InvalidSettingError(
                f"Setting {env_var_name or '<unnamed>'} is not a number: {raw!r}",
                env_var_name=env_var_name,
                value=raw,
            ) from None
