from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application settings
    APP_TITLE: str = "Local Library"
    LOG_LEVEL: str = "INFO"

    # Database settings
    DATABASE_URL: str = "sqlite+aiosqlite:///./library.db"
    SQL_ECHO: bool = False  # Set to True for SQL query debugging

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
