"""config.py - Defaults and on-disk names for FileTrie"""

# If using a real file extension it must include the "."
DEFAULT_SUFFIX = ".json"
DEFAULT_ROOT = "./data"
DEFAULT_PIECE_LENGTH = 3
# 0 disables truncation
DEFAULT_KEY_LENGTH_LIMIT = 20
DEFAULT_RANDOM_POOL_FACTOR = 10

METADATA_FILENAME = "filetrie"
ROOT_NODE = "root"
METADATA_VERSION = 1

# Most filesystems cap a single path component at 255 bytes
MAX_FILENAME_LENGTH = 255

DIR_MODE = 0o755
