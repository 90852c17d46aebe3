from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = "Moving Quote Service"
    VIACEP_BASE_URL: str = "https://viacep.com.br/ws"
    NOMINATIM_BASE_URL: str = "https://nominatim.openstreetmap.org"
    GEOCODER_USER_AGENT: str = "moving-quote-service/0.1"
    GEOCODER_TIMEOUT: float = 10.0
    LOG_DIR: str = "logs"
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"

settings = Settings()
