from __future__ import annotations

"""backend/plaza/config/settings.py

Application configuration using environment-driven settings.

This module centralizes:
- database connection URL
- CORS configuration
- Statsig server secret for backend events
- Feature flags for navigation entries
- Team and tournament limits
"""
from functools import lru_cache
from typing import List

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
  app_name: str = "plaza-backend"
  environment: str = "development"

  # Database
  database_url: str = "sqlite:///./plaza.db"

  # CORS
  allowed_origins: List[AnyHttpUrl] = [
      "http://localhost:3000",
      "http://127.0.0.1:3000",
      "http://localhost:5173",
      "http://127.0.0.1:5173",
  ]

  # Statsig (events are dropped when unset)
  statsig_server_secret: str | None = None

  # Navigation feature flags
  show_luti_nav_item: bool = False
  scrims_enabled: bool = True

  # Teams
  max_teams_non_patron: int = 2
  max_teams_patron: int = 5
  invite_code_length: int = 10

  # Tournaments
  min_members_per_team: int = 4

  model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Return a cached Settings instance."""
  return Settings()
