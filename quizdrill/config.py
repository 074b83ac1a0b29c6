from pydantic_settings import BaseSettings
from pydantic import SecretStr
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    app_name: str = "Quizdrill API"
    debug: bool = False
    log_level: str = "INFO"

    # Database Configuration
    database_url: str = "sqlite:///./quiz.db"
    seed_file: str = "data/questions.json"
    seed_on_startup: bool = True

    # Identity / cookies
    secure_cookies: bool = False
    cors_origins: List[str] = []
    cors_origin_regex: Optional[str] = r"http://localhost:\d+"

    # Supabase Configuration (bearer-token identity, disabled when url is unset)
    supabase_url: Optional[str] = None
    supabase_anon_key: SecretStr = SecretStr("")

    # Exam defaults
    default_question_count: int = 80
    default_duration_seconds: int = 3 * 60 * 60
    pass_threshold: float = 61.0  # percent, inclusive

    # History pagination
    history_default_limit: int = 20
    history_max_limit: int = 100

    explanation_languages: List[str] = ["en", "pl"]

    @property
    def supabase_enabled(self) -> bool:
        return bool(self.supabase_url)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

settings = Settings()
