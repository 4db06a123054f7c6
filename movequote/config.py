from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "MoveQuote"
    COMPANY_NAME: str = "MoveQuote Moving Co."
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"  # comma-separated

    # Routing provider. An empty key sends every lookup straight to the fallbacks
    GOOGLE_MAPS_API_KEY: str = ""
    ROUTES_API_URL: str = "https://routes.googleapis.com/directions/v2:computeRoutes"
    DISTANCE_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"


settings = Settings()
