from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "apiverifier"
    # Rejection detail is only sent in local or development
    ENVIRONMENT: Literal["local", "development", "staging", "production"] = "production"

    # Request sources searched for params, highest precedence first
    PARAM_ORDER: list[str] = ["params", "query", "body"]
    # request.state attribute that receives the verified params
    PARAM_MAP: str = "args"

    VERSION_HEADER: str = "accept-version"
    # Empty disables the endpoint info route
    API_INFO_PATH: str = ""

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT in ("local", "development")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
