from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    openai_api_key: str | None = None
    openai_base_url: str | None = None
    openai_model: str = "gpt-4o-mini"
    generation_temperature: float = 0.9
    generation_top_p: float = 1.0

    unsplash_access_key: str | None = None

    appwrite_endpoint: str | None = None
    appwrite_project_id: str | None = None
    appwrite_api_key: str | None = None
    appwrite_database_id: str = "trip-planner"
    trip_collection_id: str = "trips"
    user_collection_id: str = "users"

    country_api_endpoints: list[tuple[str, str]] = [
        ("restcountries", "https://restcountries.com/v3.1/all?fields=flag,name,latlng,maps"),
        ("sampleapis", "https://api.sampleapis.com/countries/countries"),
    ]

    llm_timeout_sec: int = 60
    country_timeout_sec: float = 10.0
    image_timeout_sec: float = 10.0
    store_timeout_sec: float = 10.0

    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def appwrite_configured(self) -> bool:
        return bool(self.appwrite_endpoint and self.appwrite_project_id and self.appwrite_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
