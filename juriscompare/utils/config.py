from __future__ import annotations
import os
from dataclasses import dataclass
from dotenv import load_dotenv

@dataclass(frozen=True)
class AppConfig:
    api_key: str = ""
    analysis_model: str = "gemini-1.5-pro"
    chat_model: str = "gemini-1.5-flash"
    max_tokens: int = 8192
    temperature: float = 0.2
    log_level: str = "INFO"
    app_version: str = "0.1.0"

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "AppConfig":
        load_dotenv()
        return cls(
            api_key=os.getenv("GOOGLE_API_KEY", ""),
            analysis_model=os.getenv("ANALYSIS_MODEL", "gemini-1.5-pro"),
            chat_model=os.getenv("CHAT_MODEL", "gemini-1.5-flash"),
            max_tokens=int(os.getenv("MAX_TOKENS", "8192")),
            temperature=float(os.getenv("TEMPERATURE", "0.2")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            app_version=os.getenv("APP_VERSION", "0.1.0"),
        )
