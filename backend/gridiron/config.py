from pydantic_settings import BaseSettings

# Only acceptable for local development
DEFAULT_JWT_SECRET = "change-me-in-production"

class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./data/nfl_fantasy.db"

    # Sportradar NFL API
    sportradar_api_key: str = ""
    sportradar_api_base: str = "https://api.sportradar.com/nfl/official/trial/v7/en"
    sportradar_timeout: float = 30.0

    # Season Configuration
    default_season_type: str = "REG"
    finalized_game_status: str = "closed"  # Sportradar's terminal game state

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 7

    # Environment
    cors_origins: list = ["http://localhost:3000"]
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
