import logging

from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from config.settings import GatewaySettings, get_settings
from schemas.schema import ErrorResponse
from src.recipe_generation.exceptions import RecipeGenerationError
from src.recipe_generation.recipe_generation import RecipeGenerator


logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def get_recipe_generator(settings: GatewaySettings = Depends(get_settings)) -> RecipeGenerator:
    return RecipeGenerator(settings)


app = FastAPI(
    title="Recipe Generator API",
    description="Generates a recipe and a food photograph from a dish name",
    version="1.0.0",
)


@app.middleware("http")
async def cors_headers(request: Request, call_next):
    """Answers pre-flight requests and stamps CORS headers on every response."""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


# Home
@app.get("/", tags=["Home"])
def index():
    return {"Project": "Recipe Generator"}


## Recipe Generation
@app.post("/", tags=["Recipes"])
@app.post("/generate-recipe", tags=["Recipes"])
async def generate_recipe(request: Request, generator: RecipeGenerator = Depends(get_recipe_generator)):
    """
    Accepts {"dishName": ...}, returns {"recipe": ..., "imageUrl": ...} or {"error": ...}
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None  # rejected as a missing dish name

    try:
        result = await run_in_threadpool(generator.generate, payload)
    except RecipeGenerationError as exc:
        log = logger.warning if exc.status_code < 500 else logger.error
        log("%s: %s | details=%s", type(exc).__name__, exc.message, exc.details)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.message).model_dump(),
            headers=CORS_HEADERS,
        )
    except Exception:
        logger.exception("Error in generate-recipe handler")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Failed to generate recipe").model_dump(),
            headers=CORS_HEADERS,
        )

    return JSONResponse(
        content=result.model_dump(by_alias=True, exclude_none=True),
        headers=CORS_HEADERS,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
