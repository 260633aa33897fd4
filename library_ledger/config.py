from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path

# Get the project directory (parent of the package directory)
PROJECT_DIR = Path(__file__).parent.parent
ENV_FILE = PROJECT_DIR / ".env"

class Settings(BaseSettings):
    # Storage - in-memory SQLite by default, nothing survives a restart
    database_url: str = "sqlite://"

    # Calendar used for borrow/due/return dates
    timezone: str = "Asia/Kuala_Lumpur"

    # Lending policy
    loan_period_days: int = 14
    fine_per_day: float = 5.0
    max_books_regular: int = 5
    max_books_premium: int = 10
    max_books_librarian: int = 20
    count_overdue_toward_limit: bool = True  # False: only ACTIVE loans count toward the limit

    # Startup
    seed_sample_data: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None  # e.g. library_system.log

    class Config:
        env_file = str(ENV_FILE) if ENV_FILE.exists() else ".env"
        env_prefix = "LIBRARY_"
        case_sensitive = False

settings = Settings()
