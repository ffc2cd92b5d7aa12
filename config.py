import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./access.db")
    DB_ECHO = bool(data.get("DB_ECHO", False))
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    INVITATION_EXPIRY_DAYS = int(data.get("INVITATION_EXPIRY_DAYS", 7))
    INVITE_BASE_URL = data.get("INVITE_BASE_URL", "http://localhost:3000")
    TOKEN_BYTES = int(data.get("TOKEN_BYTES", 32))
