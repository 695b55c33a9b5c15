from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field

class Settings(BaseSettings):
	# Single service credential; API_KEY matches the deployed functions, GEMINI_API_KEY is accepted too
	api_key: str | None = Field(default=None, validation_alias=AliasChoices("API_KEY", "GEMINI_API_KEY"))
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	gemini_base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta", validation_alias="GEMINI_BASE_URL")
	# Transport timeout; nothing else in the request path times out
	gemini_timeout_seconds: float = Field(default=30, validation_alias="GEMINI_TIMEOUT_SECONDS")

	# Sampling per task
	chat_temperature: float = Field(default=0.7, validation_alias="CHAT_TEMPERATURE")
	chat_top_p: float = Field(default=0.9, validation_alias="CHAT_TOP_P")
	test_temperature: float = Field(default=1.0, validation_alias="TEST_TEMPERATURE")

	# Largest mock test a student may request
	max_questions: int = Field(default=50, validation_alias="MAX_QUESTIONS")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# Used by the client service layer
	proxy_base_url: str = Field(default="http://localhost:8000", validation_alias="PROXY_BASE_URL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
