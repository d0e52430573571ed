import re
import json
import logging
from pathlib import Path
from typing import Any, Optional

import httpx
import openai
import yaml
from openai import OpenAI
from pydantic import ValidationError as PydanticValidationError

from config.settings import GatewaySettings
from schemas.schema import Recipe, RecipeRequest
from .exceptions import FormatError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

DISH_NAME_REQUIRED = "Dish name is required"
INVALID_RECIPE_FORMAT = "Invalid recipe format received"

FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)


# --- Helper Function to Load the Prompt ---
def load_prompt_template():
    """Loads the recipe and image prompts from the YAML file."""
    prompt_file_path = Path(__file__).parent / "recipe_prompt.yml"
    with open(prompt_file_path, 'r', encoding="utf-8") as f:
        prompt_data = yaml.safe_load(f)
    return prompt_data

prompts = load_prompt_template()


def build_gateway_client(settings: GatewaySettings, http_client: Optional[httpx.Client] = None) -> OpenAI:
    """OpenAI-compatible client pointed at the AI gateway."""
    return OpenAI(
        api_key=settings.api_key,
        base_url=settings.base_url,
        max_retries=settings.max_retries,
        http_client=http_client,
    )


# ========================================
# Step 1: Request validation
# ========================================
def parse_recipe_request(payload: Any) -> RecipeRequest:
    """
    Validates a decoded request body.
    Anything other than a JSON object with a non-blank string `dishName` is rejected.
    """
    if not isinstance(payload, dict):
        logger.warning("Rejected recipe request: body is not a JSON object")
        raise ValidationError(DISH_NAME_REQUIRED)
    try:
        return RecipeRequest.model_validate(payload)
    except PydanticValidationError as exc:
        logger.warning("Rejected recipe request: %s", exc.errors()[0]["msg"])
        raise ValidationError(DISH_NAME_REQUIRED) from exc


# ========================================
# Step 2: Recipe text generation
# ========================================
def request_recipe_text(client: OpenAI, dish_name: str, settings: GatewaySettings) -> str:
    """Asks the text model for a recipe and returns the raw message content."""
    recipe_prompt = prompts["recipe_generation_prompt"]
    try:
        response = client.chat.completions.create(
            model=settings.text_model,
            messages=[
                {"role": "system", "content": recipe_prompt["system"]},
                {"role": "user", "content": recipe_prompt["user"].format(dish_name=dish_name)},
            ],
            temperature=settings.temperature,
        )
    except openai.APIStatusError as exc:
        logger.error("Recipe AI error for %r: %s %s", dish_name, exc.status_code, exc.response.text)
        raise UpstreamError(
            f"Recipe generation failed: {exc.status_code}",
            details={"dish_name": dish_name, "upstream_status": exc.status_code},
        ) from exc
    except openai.APIConnectionError as exc:
        logger.error("Recipe AI unreachable for %r: %s", dish_name, exc)
        raise UpstreamError(
            "Recipe generation failed: gateway unreachable",
            details={"dish_name": dish_name},
        ) from exc

    content = response.choices[0].message.content if response.choices else None
    if not content:
        logger.error("Recipe AI returned no content for %r", dish_name)
        raise UpstreamError("No recipe generated", details={"dish_name": dish_name})

    logger.debug("Raw recipe response: %s", content)
    return content


# ========================================
# Step 3: JSON extraction and parsing
# ========================================
def extract_json_text(content: str) -> str:
    """
    Pulls the JSON payload out of a model reply.
    A ```json fenced block wins; otherwise every fence marker is dropped.
    """
    match = FENCED_JSON.search(content)
    if match:
        return match.group(1)
    return content.replace("```", "").strip()


def load_json_payload(text: str) -> Any:
    """json.loads, retried on the outermost {...} span when prose surrounds it."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise
        return json.loads(text[start:end + 1])


def parse_recipe(content: str, dish_name: str = "") -> Recipe:
    try:
        data = load_json_payload(extract_json_text(content))
        return Recipe.model_validate(data)
    except (json.JSONDecodeError, PydanticValidationError) as exc:
        logger.error("Failed to parse recipe JSON for %r: %s", dish_name, exc)
        raise FormatError(INVALID_RECIPE_FORMAT, details={"dish_name": dish_name}) from exc


# ========================================
# Step 4: Dish image generation (best effort)
# ========================================
def extract_image_url(data: Any) -> str:
    """Reads choices[0].message.images[0].image_url.url, or "" when absent."""
    try:
        url = data["choices"][0]["message"]["images"][0]["image_url"]["url"]
    except (KeyError, IndexError, TypeError):
        return ""
    return url if isinstance(url, str) else ""


def request_dish_image(client: OpenAI, dish_name: str, settings: GatewaySettings) -> str:
    """
    Generates a food photograph of the dish and returns its URL.
    Never raises for gateway faults: the recipe is still useful without a picture.
    """
    image_prompt = prompts["image_generation_prompt"].format(dish_name=dish_name)
    try:
        response = client.with_options(max_retries=0).chat.completions.create(
            model=settings.image_model,
            messages=[{"role": "user", "content": image_prompt}],
            extra_body={"modalities": ["image", "text"]},
        )
    except openai.APIStatusError as exc:
        logger.warning("Image generation failed for %r: %s", dish_name, exc.status_code)
        return ""
    except openai.APIError as exc:
        logger.warning("Image generation failed for %r: %s", dish_name, exc)
        return ""

    image_url = extract_image_url(response.model_dump())
    if image_url:
        logger.info("Image generated successfully for %r", dish_name)
    else:
        logger.warning("Image generation returned no image for %r", dish_name)
    return image_url
