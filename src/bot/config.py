"""Bot settings from environment variables (optionally loaded from .env)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Repo root: from src/bot/config.py go up to repo root
_REPO_ROOT = Path(__file__).resolve().parent.parent.parent


def load_env() -> None:
    """Load .env from repo root or current dir (first one found)."""
    for path in (_REPO_ROOT / ".env", Path.cwd() / ".env"):
        if path.exists():
            load_dotenv(path)
            break


@dataclass(frozen=True)
class Settings:
    token: str
    data_dir: Path


def load_settings() -> Settings:
    """Read settings from the environment. Raises SystemExit when the token is missing."""
    token = os.environ.get("TELEGRAM_BOT_TOKEN", "").strip()
    if not token:
        raise SystemExit(
            "Set TELEGRAM_BOT_TOKEN (e.g. in .env). Get a token from @BotFather."
        )
    data_dir = os.environ.get("TRUSTED_CONTACTS_DATA_DIR", "").strip() or "data"
    return Settings(token=token, data_dir=Path(data_dir).resolve())
