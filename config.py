# config.py
import os
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Project-wide settings (Pydantic V2).
    Values are read from environment variables / a .env file, falling back to the defaults below.
    """

    # Project Info
    PROJECT_NAME: str = "MVC_Casualty_Model"
    VERSION: str = "1.0.0"

    # Storage Settings
    DATA_ROOT: str = "data"
    CRASHES_CSV: str = os.path.join(DATA_ROOT, "mvc_sample.csv")
    LOG_DIR: str = "./logs"
    LOG_LEVEL: str = "INFO"

    # Modeling Settings
    SIGNIFICANCE_LEVEL: float = 0.05  # alpha for every likelihood-ratio test
    CONFIDENCE_LEVEL: float = 0.95  # odds-ratio confidence intervals
    FIT_MAXITER: int = 100
    FIT_ATTEMPTS: int = 3
    PARALLEL_FITS: bool = False

    # .env loading
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


# singleton
settings = Settings()

# log directory is created at import time
os.makedirs(settings.LOG_DIR, exist_ok=True)
