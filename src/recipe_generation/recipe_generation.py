# src/recipe_generation/recipe_generation.py

import json
import logging
from typing import Any, Optional

from openai import OpenAI

from config.settings import GatewaySettings, get_settings
from schemas.schema import GenerationResult
from .exceptions import ConfigurationError
from .recipe_tools import (
    build_gateway_client,
    parse_recipe,
    parse_recipe_request,
    request_dish_image,
    request_recipe_text,
)

logger = logging.getLogger(__name__)


class RecipeGenerator:
    """
    Turns a request body into a recipe plus an illustrative image.

    The two gateway calls run one after the other; a failed recipe call
    ends the request, a failed image call only leaves `imageUrl` empty.
    """

    def __init__(self, settings: GatewaySettings, client: Optional[OpenAI] = None):
        self.settings = settings
        self._client = client

    def check_configured(self, dish_name: str) -> None:
        if not self.settings.api_key:
            logger.error("Configuration error for %r: AI_GATEWAY_API_KEY is not configured", dish_name)
            raise ConfigurationError("Recipe service is not configured", details={"dish_name": dish_name})

    def generate(self, payload: Any) -> GenerationResult:
        request = parse_recipe_request(payload)
        self.check_configured(request.dish_name)

        if self._client is not None:
            return self._generate(self._client, request.dish_name)
        # A client built here lives for this request only
        with build_gateway_client(self.settings) as client:
            return self._generate(client, request.dish_name)

    def _generate(self, client: OpenAI, dish_name: str) -> GenerationResult:
        logger.info("Generating recipe for: %s", dish_name)
        content = request_recipe_text(client, dish_name, self.settings)
        recipe = parse_recipe(content, dish_name)

        image_url = request_dish_image(client, dish_name, self.settings)

        logger.info("Recipe generated successfully for: %s", dish_name)
        return GenerationResult(recipe=recipe, image_url=image_url)


def get_recipe_for_dish(
    dish_name: str,
    settings: Optional[GatewaySettings] = None,
    client: Optional[OpenAI] = None,
) -> GenerationResult:
    """
    Generate a recipe and image for a dish outside of the HTTP handler.

    Args:
        dish_name (str): The name of the dish to get a recipe for.
        settings (Optional[GatewaySettings]): Gateway settings; read from the
            environment when omitted.
        client (Optional[OpenAI]): A ready gateway client, mostly for tests.

    Returns:
        GenerationResult: the recipe and the image URL ("" if the image failed).
    """
    generator = RecipeGenerator(settings or get_settings(), client=client)
    return generator.generate({"dishName": dish_name})


# This part allows the script to be run as an example from the command line
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    # You can change this to test other dishes
    dish_to_try = "Spaghetti Carbonara"
    result = get_recipe_for_dish(dish_to_try)
    print(json.dumps(result.model_dump(by_alias=True, exclude_none=True), indent=2))
