from __future__ import annotations

"""backend/transactionable/config/settings.py

Library configuration using environment-driven settings.

This module centralizes:
- database connection URL used when no session is supplied
- SQL echo toggle for debugging
- default number of attempts for retriable errors

Every field can be overridden with a TRANSACTIONABLE_-prefixed
environment variable or an entry in a local .env file.
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
  app_name: str = "transactionable"
  environment: str = "development"

  # Database used for sessions opened by the wrapper itself
  database_url: str = "sqlite://"
  database_echo: bool = False

  # One initial attempt plus one retry
  max_attempts: int = Field(default=2, ge=1)

  model_config = SettingsConfigDict(
      env_prefix="TRANSACTIONABLE_",
      env_file=".env",
      env_file_encoding="utf-8",
      extra="ignore",
  )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Return a cached Settings instance."""
  return Settings()
