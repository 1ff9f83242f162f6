from pydantic import BaseModel, Field
from typing import Literal


DEFAULT_PUBLISH_ENDPOINT = "https://stage.xtiles.app/api/ai/gpt/generate-from-md"


class LLMSettings(BaseModel):
    provider: Literal["google", "openai", "anthropic", "auto"] = "google"
    model: str = "gemini-2.5-flash"
    api_key_env: str = "GEMINI_API_KEY"
    max_tokens: int = Field(default=8192, gt=0)
    temperature: float = Field(default=1.45, ge=0, le=2)
    grounding: bool = True
    base_url: str | None = None


class PublisherConfig(BaseModel):
    endpoint: str = DEFAULT_PUBLISH_ENDPOINT
    api_key_env: str = "XTILES_API_KEY"
    payload_shape: Literal["markdown", "email_bot"] = "markdown"
    process_id: str = "planboard"
    timeout: float | None = Field(default=None, gt=0)


class SessionConfig(BaseModel):
    mode: Literal["stateful", "full_history"] = "stateful"
    reset_on_same_mode: bool = False


class ProxyConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=8787, gt=0, lt=65536)
    upstream: str = DEFAULT_PUBLISH_ENDPOINT


class PlanboardConfig(BaseModel):
    llm: LLMSettings = Field(default_factory=LLMSettings)
    publisher: PublisherConfig = Field(default_factory=PublisherConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    proxy: ProxyConfig = Field(default_factory=ProxyConfig)
    system_prompt_path: str | None = None
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
