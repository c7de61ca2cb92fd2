"""Settings (pydantic-settings, loaded from env vars)."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # --- Language model ---
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    DEFAULT_MODEL: str = "gpt-3.5-turbo"
    LLM_TEMPERATURE: float = 0.1
    LLM_MAX_TOKENS: int = 2048

    # --- Sources ---
    TAVILY_API_KEY: str = ""
    TAVILY_MAX_RESULTS: int = 10
    ARXIV_MAX_RESULTS: int = 5
    DEFAULT_MARKET_SYMBOL: str = "SPY"
    MAX_MARKET_SYMBOLS: int = 5
    SYMBOL_STOPWORDS: list[str] = [
        "AI", "API", "CEO", "CFO", "CPI", "ESG", "ETF", "EU", "FX", "GDP",
        "IPO", "LLM", "ML", "OK", "PE", "REIT", "ROI", "UK", "US", "USA", "USD",
    ]

    # --- Stage policy ---
    REQUEST_TIMEOUT_SECONDS: float = 10.0
    STAGE_MAX_ATTEMPTS: int = 1
    PROMPT_MAX_CHARS: int = 4000

    # --- LangSmith ---
    LANGSMITH_API_KEY: str = ""
    LANGSMITH_PROJECT: str = "financial-research-agent"
    LANGSMITH_ENDPOINT: str = "https://api.smith.langchain.com"

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = {"env_prefix": "", "case_sensitive": True}
