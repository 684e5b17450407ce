"""
Centralized application configuration.

Settings are read from CHESS_-prefixed environment variables (or a .env file).
Only the service and persistence layers read these. The rules engine in src/chess never does.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.chess.fen import STARTING_FEN


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CHESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Persistence
    database_url: str = "sqlite:///:memory:"
    echo_sql: bool = False

    # New games start here unless the request supplies its own FEN
    starting_fen: str = STARTING_FEN

    # Header block of exported movetext
    pgn_event: str = "Casual Game"
    pgn_site: str = "Local"
    pgn_white: str = "White"
    pgn_black: str = "Black"


@lru_cache
def get_settings() -> Settings:
    return Settings()
