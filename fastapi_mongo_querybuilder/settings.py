# fastapi_mongo_querybuilder/settings.py

from functools import lru_cache

from pydantic import PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class QueryBuilderSettings(BaseSettings):
    """Defaults loaded from QUERYBUILDER_* env vars."""

    model_config = SettingsConfigDict(env_prefix="QUERYBUILDER_", extra="ignore")

    default_page_size: PositiveInt = 20


@lru_cache
def get_settings() -> QueryBuilderSettings:
    return QueryBuilderSettings()


def reload_settings() -> QueryBuilderSettings:
    get_settings.cache_clear()
    return get_settings()
