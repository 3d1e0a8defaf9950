"""
GridFS Cleaner YAML Configuration

Loading of the optional config.yaml that supplies defaults for the
non-secret settings. Environment variables always take precedence.
"""

from pathlib import Path

import yaml

from gridfs_cleaner.exceptions import ConfigurationError

# --- Example Config Template ---

EXAMPLE_CONFIG_YAML = """\
# GridFS Cleaner Configuration
# The connection string and DryRun flag are read from the environment only.

# Database holding the GridFS bucket
database: "dr-move-public-api"

# Bucket prefix (<bucket>.files and <bucket>.chunks)
bucket: "packages"

# Index used to cover the chunk scan; set to null to let the server choose
index_hint: "files_id_1_n_1"

# Seconds between progress log lines
progress_interval: 10

# Parallel existence lookups per scanned batch
classify_workers: 1

# Logging
debug: false
log_file: "mongo.txt"
"""


def load_yaml_config(config_path: str | Path | None) -> dict:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file, or None

    Returns:
        Configuration dictionary (empty if no path was given)

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a mapping
    """
    if not config_path:
        return {}

    path = Path(config_path).expanduser()
    if not path.is_file():
        raise ConfigurationError("Config file not found", {"path": str(path)})

    try:
        content = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not read config file: {e}", {"path": str(path)}) from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError("Config file must contain a mapping", {"path": str(path)})
    return content
