from typing import Optional, List, Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class RecipeRequest(BaseModel):
    dish_name: StrictStr = Field(..., alias="dishName")

    @field_validator("dish_name")
    @classmethod
    def strip_dish_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("dish name cannot be blank")
        return value


class Recipe(BaseModel):
    """
    A recipe as returned to the client.
    Field aliases match the JSON shape the model is asked to produce.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    prep_time: Optional[str] = Field(default=None, alias="prepTime")    # e.g. "15 minutes"
    cook_time: Optional[str] = Field(default=None, alias="cookTime")
    servings: Optional[str] = None                                     # e.g. "4 servings"
    ingredients: List[str] = Field(..., min_length=1)
    instructions: List[str] = Field(..., min_length=1)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("description", "prep_time", "cook_time", "servings", mode="before")
    @classmethod
    def stringify_values(cls, value: Any) -> Any:
        # Models often answer "servings": 4 instead of "4 servings"
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, dict):
            value = list(value.values())
        if isinstance(value, list):
            return " ".join(str(v).strip() for v in value if v not in (None, "")) or None
        return value

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def flatten_lines(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.splitlines()
        if not isinstance(value, list):
            return value

        lines = []
        for item in value:
            if isinstance(item, dict):
                # {"name": "eggs", "amount": "2"} -> "eggs 2"
                item = " ".join(str(v) for v in item.values() if v not in (None, ""))
            elif not isinstance(item, str):
                item = str(item)
            item = item.strip()
            if item:
                lines.append(item)
        return lines


class GenerationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipe: Recipe
    image_url: str = Field(default="", alias="imageUrl")  # "" when the image step degraded


class ErrorResponse(BaseModel):
    error: str
