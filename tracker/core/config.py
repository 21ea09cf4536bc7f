import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Config:
    app_env: str = os.getenv("APP_ENV", "dev")
    tz: str = os.getenv("TZ", "UTC")
    telegram_token: str = os.getenv("TELEGRAM_TOKEN", "")
    data_dir: str = os.getenv("DATA_DIR", "./var")
    sqlite_path: str = os.getenv("SQLITE_PATH", "./var/app.db")
    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    ai_timeout_sec: float = float(os.getenv("AI_TIMEOUT_SEC", "20"))
    session_ttl_sec: int = int(os.getenv("SESSION_TTL_SEC", str(12 * 3600)))
    max_audio_mb: int = int(os.getenv("MAX_AUDIO_MB", "5"))

    @property
    def max_audio_bytes(self) -> int:
        return self.max_audio_mb * 1024 * 1024


cfg = Config()
