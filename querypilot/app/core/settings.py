from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_ENV: str = "development"
    CLIENT_URL: str = "http://localhost:3000"

    LLM_PROVIDER: str = "openai"
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_API_KEY: str = ""
    LLM_TEMPERATURE: float = 0.0

    DEFAULT_QUERY_MODE: str = "read-only"
    SNAPSHOT_LIMIT: int = 100
    SQL_INDENT: int = 2

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_JSON: bool = True

    # fallbacks for connect requests that omit credential fields
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = ""
    POSTGRES_USER: str = ""
    POSTGRES_PASSWORD: str = ""

    MYSQL_HOST: str = "localhost"
    MYSQL_PORT: int = 3306
    MYSQL_DB: str = ""
    MYSQL_USER: str = ""
    MYSQL_PASSWORD: str = ""

    SQLITE_PATH: str = "./database.sqlite"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


settings = Settings()
