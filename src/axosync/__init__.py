"""axosync - Local sourcemap sync server for editor plugins."""

__version__ = "0.1.0"

# File constants
CONFIG_FILE = "axosync.json"
SOURCEMAP_FILE = "sourcemap.json"

# Server defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 33752
