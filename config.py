# config.py
from pathlib import Path

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"

# Runtime switches (disk cache, logging) are read from this JSON file at startup.
# A missing file means every switch keeps its default.
CONFIG_FILE = BASE_DIR / "config.json"

# Where resolved skins are stored when the disk cache is enabled
SKIN_CACHE_DIR = DATA_DIR / "skins"

# Server listening host
# "127.0.0.1" means only accessible from the local machine
# "0.0.0.0" means accessible from other machines on the network
HOST = "localhost"

# Server listening port
PORT = 9999

# Logging level for Uvicorn and the application
# Options: "debug", "info", "warning", "error", "critical"
LOG_LEVEL = "info"

# Seconds before a call to the Mojang APIs is abandoned
REQUEST_TIMEOUT = 5.0

# Mojang endpoints used to resolve players and their skins
PROFILE_API_URL = "https://api.mojang.com/users/profiles/minecraft/{name}"
SESSION_API_URL = "https://sessionserver.mojang.com/session/minecraft/profile/{uuid}"

VERSION = "1.3"
