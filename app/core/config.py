from pydantic_settings import BaseSettings
from typing import List, Union
from urllib.parse import quote_plus
from pydantic import field_validator
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API Settings
    PROJECT_NAME: str = "Uplift Orbit API"
    ENVIRONMENT: str = "development"
    PORT: int = 5000

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    # Database Settings
    DB_USER: str = ""
    DB_PASS: str = ""
    MONGO_SCHEME: str = "mongodb"
    MONGO_HOST: str = "localhost:27017"
    MONGO_APP_NAME: str = "UpliftOrbit"
    MONGO_DB_NAME: str = "upliftOrbitDB"

    @property
    def MONGODB_URL(self) -> str:
        credentials = ""
        if self.DB_USER:
            credentials = f"{quote_plus(self.DB_USER)}:{quote_plus(self.DB_PASS)}@"
        return f"{self.MONGO_SCHEME}://{credentials}{self.MONGO_HOST}/?appName={self.MONGO_APP_NAME}"

    # JWT Settings
    ACCESS_TOKEN_SECRET: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    SESSION_COOKIE_NAME: str = "token"

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # CORS Settings - can be set as JSON string in .env
    BACKEND_CORS_ORIGINS: Union[List[str], str] = [
        "http://localhost:5173",
        "http://localhost:5174",
        "https://uplift-orbit.web.app",
    ]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        """Parse CORS origins from JSON string or list"""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, split by comma
                return [origin.strip() for origin in v.split(",")]
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
