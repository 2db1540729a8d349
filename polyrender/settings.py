from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="POLYRENDER_", case_sensitive=False)

    context_suffix: str = ".ctx.json"
    default_context_name: str = "default.ctx.json"
    rendered_infix: str = "rendered"
    default_extension: str = "html"
    autoescape_extensions: list[str] = ["html", "htm", "xml"]
    file_mode: int = 0o644


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
