"""
Tournament configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Tournament settings from environment variables"""

    # Storage
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "cricket_cup.db")

    # Single fixed tournament key for the bracket document and knockout guard
    TOURNAMENT_ID: str = os.getenv("TOURNAMENT_ID", "default")

    # Match defaults
    DEFAULT_BALLS_PER_TEAM: int = int(os.getenv("DEFAULT_BALLS_PER_TEAM", "30"))
    GROUP_STAGE_MATCH_TYPE: str = os.getenv("GROUP_STAGE_MATCH_TYPE", "Tournament")

    # Extra CORS origins (comma-separated)
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.DATABASE_PATH}"


settings = Settings()
