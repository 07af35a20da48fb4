# taskboard/core/config.py
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # app
    app_env: str = Field("local", alias="APP_ENV")
    app_title: str = Field("Task Board", alias="APP_TITLE")
    app_version: str = Field("0.1.0", alias="APP_VERSION")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # REST backend that owns the task records
    api_base_url: str = Field("http://localhost:5000/api", alias="TASKS_API_BASE_URL")

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
