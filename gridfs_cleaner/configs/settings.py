"""
GridFS Cleaner Runtime Settings

Combines defaults, the optional YAML config and environment variables into
a validated CleanerSettings. Validation happens before any store connection
is attempted.

Priority (highest wins):
1. Environment variables
2. YAML config file
3. Defaults
"""

import os
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from gridfs_cleaner.configs.constants import (
    DEFAULT_BUCKET,
    DEFAULT_CLASSIFY_WORKERS,
    DEFAULT_DATABASE,
    DEFAULT_INDEX_HINT,
    DEFAULT_LOG_FILE,
    DEFAULT_PROGRESS_INTERVAL,
    ENV_BUCKET,
    ENV_CONFIG_PATH,
    ENV_CONNECTION_STRING,
    ENV_DATABASE,
    ENV_DEBUG,
    ENV_DRY_RUN,
    ENV_LOG_FILE,
)
from gridfs_cleaner.configs.yaml_config import load_yaml_config
from gridfs_cleaner.exceptions import ConfigurationError, MissingConfigError

_CREDENTIALS_RE = re.compile(r"^(?P<scheme>[a-z0-9+.-]+://)[^@/]*@", re.IGNORECASE)


@dataclass(frozen=True)
class CleanerSettings:
    """Validated settings for one cleaner run."""

    connection_string: str
    dry_run: bool = True
    database: str = DEFAULT_DATABASE
    bucket: str = DEFAULT_BUCKET
    index_hint: Optional[str] = DEFAULT_INDEX_HINT
    progress_interval: float = DEFAULT_PROGRESS_INTERVAL
    classify_workers: int = DEFAULT_CLASSIFY_WORKERS
    debug: bool = False
    log_file: str = DEFAULT_LOG_FILE

    @property
    def files_collection(self) -> str:
        return f"{self.bucket}.files"

    @property
    def chunks_collection(self) -> str:
        return f"{self.bucket}.chunks"

    @property
    def redacted_connection_string(self) -> str:
        """Connection string safe for logging (credentials masked)."""
        return redact_connection_string(self.connection_string)


def redact_connection_string(connection_string: str) -> str:
    """Mask the user:password part of a MongoDB URI."""
    return _CREDENTIALS_RE.sub(r"\g<scheme>***@", connection_string)


def parse_bool(value: Any, name: str) -> bool:
    """
    Parse a textual boolean.

    Accepts "true"/"false" in any case with surrounding whitespace, or an
    actual bool (from YAML).

    Raises:
        ConfigurationError: For any other value
    """
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise ConfigurationError(
        f"Please provide a valid value for '{name}' (true or false)",
        {"name": name, "value": value},
    )


def _positive_number(value: Any, name: str, cast: type) -> Any:
    if isinstance(value, bool):
        raise ConfigurationError(f"'{name}' must be a positive number", {"value": value})
    try:
        number = cast(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"'{name}' must be a positive number", {"value": value}) from e
    if number <= 0:
        raise ConfigurationError(f"'{name}' must be a positive number", {"value": value})
    return number


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[str] = None,
) -> CleanerSettings:
    """
    Load and validate settings.

    Args:
        environ: Environment mapping (defaults to os.environ)
        config_path: YAML config path. Defaults to GRIDFS_CLEANER_CONFIG env var.

    Returns:
        Validated CleanerSettings

    Raises:
        MissingConfigError: If the connection string is missing or empty
        ConfigurationError: If any value cannot be parsed
    """
    env = os.environ if environ is None else environ

    connection_string = env.get(ENV_CONNECTION_STRING, "").strip()
    if not connection_string:
        raise MissingConfigError(ENV_CONNECTION_STRING)

    dry_run = parse_bool(env.get(ENV_DRY_RUN, "true"), ENV_DRY_RUN)

    yaml_config = load_yaml_config(config_path or env.get(ENV_CONFIG_PATH))

    database = env.get(ENV_DATABASE) or yaml_config.get("database") or DEFAULT_DATABASE
    bucket = env.get(ENV_BUCKET) or yaml_config.get("bucket") or DEFAULT_BUCKET

    index_hint = yaml_config.get("index_hint", DEFAULT_INDEX_HINT)
    if index_hint is not None and not isinstance(index_hint, str):
        raise ConfigurationError("'index_hint' must be an index name or null", {"value": index_hint})

    progress_interval = _positive_number(
        yaml_config.get("progress_interval", DEFAULT_PROGRESS_INTERVAL),
        "progress_interval",
        float,
    )
    classify_workers = _positive_number(
        yaml_config.get("classify_workers", DEFAULT_CLASSIFY_WORKERS),
        "classify_workers",
        int,
    )

    if env.get(ENV_DEBUG):
        debug = parse_bool(env[ENV_DEBUG], ENV_DEBUG)
    else:
        debug = parse_bool(yaml_config.get("debug", False), "debug")

    log_file = env.get(ENV_LOG_FILE, yaml_config.get("log_file", DEFAULT_LOG_FILE))

    return CleanerSettings(
        connection_string=connection_string,
        dry_run=dry_run,
        database=str(database),
        bucket=str(bucket),
        index_hint=index_hint or None,
        progress_interval=progress_interval,
        classify_workers=classify_workers,
        debug=debug,
        log_file=log_file or "",
    )
