from pathlib import Path
import os

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Priority: environment variables > .env file
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # Delay before an empty session is deleted (rejoining inside it rescues the session)
    SESSION_GRACE_SECONDS: float = 60 * 60
    MAX_CODE_SIZE_BYTES: int = 1024 * 1024
    # Oversize is only a policy hook unless this is switched on
    ENFORCE_CODE_SIZE_LIMIT: bool = False
    SHARE_BASE_URL: str = "http://localhost:5173"
    DEFAULT_LANGUAGE: str = "javascript"

# Load .env before creating the Settings instance so pydantic-settings sees it
current_dir = Path(__file__).resolve().parent
env_paths = [
    current_dir.parent.parent / ".env",         # Project root
    current_dir.parent / ".env",                # codeinterview/.env
    Path(os.getcwd()) / ".env",                 # Current working directory
]

for env_path in env_paths:
    if env_path.exists():
        load_dotenv(env_path, override=False)
        break

config = Settings()
