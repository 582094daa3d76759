from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
	# Any OpenAI-compatible endpoint works (Azure proxies, local gateways, ...)
	openai_base_url: str = Field(default="https://api.openai.com/v1", validation_alias="OPENAI_BASE_URL")
	openai_model: str = Field(default="gpt-4o-mini", validation_alias="OPENAI_MODEL")
	openai_tts_model: str = Field(default="tts-1", validation_alias="OPENAI_TTS_MODEL")
	openai_transcribe_model: str = Field(default="whisper-1", validation_alias="OPENAI_TRANSCRIBE_MODEL")

	ai_timeout_seconds: float = Field(default=60.0, validation_alias="AI_TIMEOUT_SECONDS")
	ai_max_retries: int = Field(default=2, validation_alias="AI_MAX_RETRIES")
	ai_retry_backoff_seconds: float = Field(default=0.5, validation_alias="AI_RETRY_BACKOFF_SECONDS")

	# OpenRouter fallback configuration (optional, text completions only)
	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="x-ai/grok-4-fast:free", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="English Skills Practice", validation_alias="OPENROUTER_TITLE")

	# Language the evaluator writes its learner-facing feedback in
	feedback_language: str = Field(default="Turkish", validation_alias="FEEDBACK_LANGUAGE")

	# Single-user mode key used when a request does not name a user
	default_user_id: str = Field(default="default", validation_alias="DEFAULT_USER_ID")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
