from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RT_", env_file=".env", extra="ignore")

    ENV: str = Field(default="dev")
    DB_URL: str = Field(default="sqlite:///./reqtrack.db")
    DB_ECHO: bool = Field(default=False)

    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: str = Field(default="logs")

    # 启动时自动建表（无迁移）
    CREATE_TABLES_ON_STARTUP: bool = Field(default=True)

settings = Settings()
