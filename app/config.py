from typing import Optional

from pydantic import BaseModel
from dotenv import load_dotenv
import os

from .errors import ConfigError

# Load environment variables from .env file
load_dotenv()

class Settings(BaseModel):
    # Server
    port: Optional[str] = os.getenv("PORT")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Database (SQLite file)
    db_path: str = os.getenv("DB_PATH", "sales.db")

    # Query safety
    default_limit: int = int(os.getenv("DEFAULT_LIMIT", "100"))
    max_query_length: int = int(os.getenv("MAX_QUERY_LENGTH", "500"))

    # LLM (OpenAI-compatible chat completions endpoint)
    llm_base_url: str = os.getenv("LLM_BASE_URL", "https://models.inference.ai.azure.com")
    llm_api_token: str = os.getenv("LLM_API_TOKEN") or os.getenv("GITHUB_PAT", "")
    llm_model: str = os.getenv("LLM_MODEL", "gpt-4o-mini")
    llm_timeout: float = float(os.getenv("LLM_TIMEOUT", "60"))
    llm_temperature: float = 1.0
    llm_top_p: float = 1.0
    llm_max_tokens: int = 1000

    def require(self, port: bool = True) -> None:
        """
        Fails fast when a required variable is missing.
        Called before the server starts; there is no fallback for either value.
        """
        problems = []
        if port:
            if not self.port:
                problems.append("PORT is not defined")
            elif not self.port.isdigit():
                problems.append(f"PORT must be an integer, got {self.port!r}")
        if not self.llm_api_token:
            problems.append("LLM_API_TOKEN (or GITHUB_PAT) is not defined")
        if problems:
            raise ConfigError("; ".join(problems))

# Create a global settings object
settings = Settings()
