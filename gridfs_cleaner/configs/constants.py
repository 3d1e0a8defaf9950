"""
GridFS Cleaner Constants

Environment variable names, defaults and exit codes.
"""

LOGGER_NAME = "gridfs_cleaner"

# --- Environment Variables ---

ENV_CONNECTION_STRING = "MongoConnectionString"
ENV_DRY_RUN = "DryRun"
ENV_DATABASE = "GRIDFS_CLEANER_DATABASE"
ENV_BUCKET = "GRIDFS_CLEANER_BUCKET"
ENV_DEBUG = "GRIDFS_CLEANER_DEBUG"
ENV_LOG_FILE = "GRIDFS_CLEANER_LOG_FILE"
ENV_CONFIG_PATH = "GRIDFS_CLEANER_CONFIG"

# --- Defaults ---

DEFAULT_DATABASE = "dr-move-public-api"
DEFAULT_BUCKET = "packages"
# Compound index created by every GridFS driver on <bucket>.chunks
DEFAULT_INDEX_HINT = "files_id_1_n_1"
DEFAULT_PROGRESS_INTERVAL = 10.0  # seconds
DEFAULT_CLASSIFY_WORKERS = 1
DEFAULT_LOG_FILE = "mongo.txt"

# Field linking a chunk to its file metadata record
FILES_ID_FIELD = "files_id"

# --- Exit Codes ---

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_RUN_FAILED = 2
