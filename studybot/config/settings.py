from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "studybot"
    db_username: str = "studybot"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    pdf_engine: str = "pdfplumber"
    max_upload_bytes: int = 20 * 1024 * 1024
    files_root: str = "/app/files"

    ai_provider: str = "openai"
    ai_temperature: float = 0.3

    ai_openai_api_key: str = ""
    ai_openai_model_name: str = "gpt-4o-mini"
    ai_openai_timeout_seconds: int = 60

    ai_openai_compatible_base_url: str = ""
    ai_openai_compatible_api_key: str = ""
    ai_openai_compatible_model_name: str = ""
    ai_openai_compatible_timeout_seconds: int = 60

    ai_openrouter_api_key: str = ""
    ai_openrouter_model_name: str = "google/gemini-2.5-flash"
    ai_openrouter_timeout_seconds: int = 60

    ai_groq_api_key: str = ""
    ai_groq_model_name: str = ""
    ai_groq_timeout_seconds: int = 60

    ai_together_api_key: str = ""
    ai_together_model_name: str = ""
    ai_together_timeout_seconds: int = 60

    ai_deepseek_api_key: str = ""
    ai_deepseek_model_name: str = ""
    ai_deepseek_timeout_seconds: int = 60

    ai_ollama_api_key: str = "ollama"
    ai_ollama_model_name: str = ""
    ai_ollama_timeout_seconds: int = 120
