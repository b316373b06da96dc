from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./subquote.db"
    BUSINESS_NAME: str = "SubQuote Subtitle & Transcription"
    CURRENCY_SYMBOL: str = "฿"
    LOG_LEVEL: str = "INFO"

    # Schedule board
    DUE_SOON_DAYS: int = 2  # warn when a job is due within this many days

    # Project listing
    PAGE_SIZE: int = 10

    class Config:
        env_file = ".env"


settings = Settings()
