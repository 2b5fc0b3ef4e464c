from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    api_key: str = ""  # empty = no auth check (local dev)
    openai_api_key: str = ""
    # Gemini speaks the OpenAI chat-completions protocol on this endpoint
    openai_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    openai_model: str = "gemini-2.5-pro"
    max_video_size_bytes: int = 20 * 1024 * 1024  # 20MB
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
