import os
from typing import List
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "MedRank Tracker")
    API_V1_STR: str = os.getenv("API_V1_STR", "/api/v1")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Local key-value blob storage
    DATA_FILE: str = os.getenv("DATA_FILE", "medrank_data.json")
    STORAGE_KEY: str = os.getenv("STORAGE_KEY", "medrank_tests_data")

    # Gemini. API_KEY is accepted for compatibility with older .env files.
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", os.getenv("API_KEY", ""))
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GEMINI_API_URL: str = os.getenv("GEMINI_API_URL", "")
    GEMINI_TIMEOUT: float = float(os.getenv("GEMINI_TIMEOUT", "60"))

    # CORS, comma separated
    BACKEND_CORS_ORIGINS: str = os.getenv("BACKEND_CORS_ORIGINS", "")

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        case_sensitive = True

settings = Settings()
