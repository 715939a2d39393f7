"""
Plugin configuration.

The allowed-type sets are read once at startup (or on an explicit reload)
and never mutated afterwards. Sources, first match wins:

- the "upload_filter" section of the bot JSON config
- ALLOWED_MIME_TYPES / ALLOWED_EXTENSIONS environment variables (comma-separated)
- the built-in image defaults
"""

import os
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .gatekeeper import DEFAULT_ALLOWED_MIME_TYPES, DEFAULT_ALLOWED_EXTENSIONS

logger = logging.getLogger(__name__)

CONFIG_SECTION = "upload_filter"


class ConfigurationError(Exception):
    """Invalid plugin configuration."""
    pass


def _check_strings(name: str, values) -> None:
    """Reject a bare string or any non-string entry."""
    if isinstance(values, (str, bytes)) or not isinstance(values, (list, tuple, set, frozenset)):
        raise ConfigurationError(f"{name} must be a list of strings")

    bad = [v for v in values if not isinstance(v, str)]
    if bad:
        raise ConfigurationError(f"{name} entries must be strings, got {bad!r}")


@dataclass(frozen=True)
class Configuration:
    """Immutable snapshot of the plugin settings."""
    allowed_mime_types: frozenset = field(default=DEFAULT_ALLOWED_MIME_TYPES)
    allowed_extensions: frozenset = field(default=DEFAULT_ALLOWED_EXTENSIONS)

    @classmethod
    def create(
        cls,
        allowed_mime_types: Iterable[str],
        allowed_extensions: Iterable[str]
    ) -> "Configuration":
        """
        Build a validated configuration.

        Extensions are lowercased; MIME types are kept verbatim.

        Raises:
            ConfigurationError: If a value is not a list of strings, a set is
                empty, or an extension has no leading dot
        """
        _check_strings("allowed_mime_types", allowed_mime_types)
        _check_strings("allowed_extensions", allowed_extensions)

        mime_types = frozenset(m.strip() for m in allowed_mime_types if m.strip())
        extensions = frozenset(
            e.strip().lower() for e in allowed_extensions if e.strip()
        )

        if not mime_types:
            raise ConfigurationError("allowed_mime_types must not be empty")
        if not extensions:
            raise ConfigurationError("allowed_extensions must not be empty")

        bad = sorted(e for e in extensions if not e.startswith("."))
        if bad:
            raise ConfigurationError(
                f"extensions must start with '.': {', '.join(bad)}"
            )

        return cls(allowed_mime_types=mime_types, allowed_extensions=extensions)


def _split_env(name: str) -> Optional[list[str]]:
    value = os.getenv(name)
    if not value:
        return None
    return value.split(",")


def load_configuration(config_path: Path | None = None) -> Configuration:
    """
    Load the plugin configuration.

    Args:
        config_path: Optional path to the bot JSON config file

    Returns:
        Validated Configuration

    Raises:
        ConfigurationError: If the file is unreadable or the values are invalid
    """
    section = {}

    if config_path is not None:
        try:
            with open(config_path) as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"failed to read configuration from {config_path}: {e}"
            ) from e

        if not isinstance(document, dict):
            raise ConfigurationError(f"{config_path} must contain a JSON object")

        section = document.get(CONFIG_SECTION)
        if section is None:
            section = {}
        elif not isinstance(section, dict):
            raise ConfigurationError(f"'{CONFIG_SECTION}' in {config_path} must be an object")

    mime_types = section.get("allowed_mime_types")
    if mime_types is None:
        mime_types = _split_env("ALLOWED_MIME_TYPES")

    extensions = section.get("allowed_extensions")
    if extensions is None:
        extensions = _split_env("ALLOWED_EXTENSIONS")

    config = Configuration.create(
        mime_types if mime_types is not None else DEFAULT_ALLOWED_MIME_TYPES,
        extensions if extensions is not None else DEFAULT_ALLOWED_EXTENSIONS,
    )

    logger.info(
        f"Upload filter allows MIME types {sorted(config.allowed_mime_types)} "
        f"and extensions {sorted(config.allowed_extensions)}"
    )
    return config
