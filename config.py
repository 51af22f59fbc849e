"""Application settings.

Loads environment variables (optionally from a `.env` file) once at import
and exposes them through the module-level `settings` object.
"""

import os
from dotenv import load_dotenv

load_dotenv()

SUPPORTED_DRIVERS = ("sqlite", "mysql", "postgres")


class Settings:
    APP_ENV: str
    DATABASE_URL: str
    DATABASE_DRIVER: str
    DATABASE_HOST: str
    DATABASE_PORT: int
    DATABASE_USER: str
    DATABASE_PASSWORD: str
    DATABASE_NAME: str
    SQLITE_PATH: str
    IN_MEMORY_DB: bool
    LOG_LEVEL: str
    CORS_ORIGINS: list[str]
    PORT: int

    def __init__(self):
        self.APP_ENV = os.getenv("APP_ENV", "development").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", "")
        self.DATABASE_DRIVER = self._driver_from_env()
        default_port = "5432" if self.DATABASE_DRIVER == "postgres" else "3306"
        self.DATABASE_HOST = os.getenv("DATABASE_HOST", "localhost")
        self.DATABASE_PORT = int(os.getenv("DATABASE_PORT", default_port))
        self.DATABASE_USER = os.getenv("DATABASE_USER", "erp")
        self.DATABASE_PASSWORD = os.getenv("DATABASE_PASSWORD", "")
        self.DATABASE_NAME = os.getenv("DATABASE_NAME", "erp")
        self.SQLITE_PATH = os.getenv("SQLITE_PATH", "erp.db")
        self.IN_MEMORY_DB = os.getenv("IN_MEMORY_DB", "false").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.CORS_ORIGINS = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]
        self.PORT = int(os.getenv("PORT", os.getenv("FASTAPIPORT", "8080")))
        self._validate()

    def _driver_from_env(self) -> str:
        url = self.DATABASE_URL.lower()
        if url.startswith(("postgresql://", "postgres://")):
            return "postgres"
        if url.startswith("mysql://"):
            return "mysql"
        return os.getenv("DATABASE_DRIVER", "sqlite").lower()

    def _validate(self):
        if self.DATABASE_DRIVER not in SUPPORTED_DRIVERS:
            raise RuntimeError(
                f"DATABASE_DRIVER must be one of {', '.join(SUPPORTED_DRIVERS)}; "
                f"got '{self.DATABASE_DRIVER}'"
            )

    @property
    def is_development(self) -> bool:
        return self.APP_ENV in ("development", "dev", "")


settings = Settings()
