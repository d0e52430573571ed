import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()

DEFAULT_BASE_URL = "https://ai.gateway.lovable.dev/v1"
DEFAULT_TEXT_MODEL = "google/gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "google/gemini-2.5-flash-image-preview"


class GatewaySettings(BaseModel):
    """Credentials and model choices for the generative-AI gateway."""

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    text_model: str = DEFAULT_TEXT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_retries: int = Field(default=0, ge=0)  # text call only
    log_level: str = "INFO"


def get_settings() -> GatewaySettings:
    """Reads the gateway settings from the environment (and .env)."""
    return GatewaySettings(
        api_key=os.getenv("AI_GATEWAY_API_KEY") or None,
        base_url=os.getenv("AI_GATEWAY_BASE_URL", DEFAULT_BASE_URL),
        text_model=os.getenv("AI_GATEWAY_TEXT_MODEL", DEFAULT_TEXT_MODEL),
        image_model=os.getenv("AI_GATEWAY_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
        temperature=os.getenv("RECIPE_TEMPERATURE", "0.7"),
        max_retries=os.getenv("AI_GATEWAY_MAX_RETRIES", "0"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
