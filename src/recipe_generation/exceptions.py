"""Errors raised while turning a dish name into a recipe."""

from typing import Any, Dict, Optional


class RecipeGenerationError(Exception):
    """Base error; carries the HTTP status the handler answers with."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}


class ValidationError(RecipeGenerationError):
    """The request did not carry a usable dish name."""
    status_code = 400


class ConfigurationError(RecipeGenerationError):
    """The gateway credential is missing from the deployment."""
    pass


class UpstreamError(RecipeGenerationError):
    """The text-generation gateway failed or returned nothing."""
    pass


class FormatError(RecipeGenerationError):
    """The model reply could not be read as a recipe."""
    pass
