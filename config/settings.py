import os
from typing import Optional, List
from dotenv import load_dotenv
from pathlib import Path

# Load .env from project folder explicitly (works even if CWD differs)
_BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=_BASE_DIR / ".env")


class Settings:
    # OpenAI (narrative + metadata only, never scoring)
    OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_TIMEOUT_SECONDS: float = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "20"))

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8010"))
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"

    # CORS
    ALLOWED_ORIGINS: List[str] = os.getenv("ALLOWED_ORIGINS", "*").split(",")

    # Observability
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    ENABLE_PROMETHEUS: bool = os.getenv("ENABLE_PROMETHEUS", "False").lower() == "true"

    # Pairing
    PAIRING_TOP_K: int = int(os.getenv("PAIRING_TOP_K", "3"))
    PAIRING_TABLES_PATH: Optional[str] = os.getenv("PAIRING_TABLES_PATH") or None
    NARRATIVE_ENABLED: bool = os.getenv("NARRATIVE_ENABLED", "True").lower() == "true"


settings = Settings()
