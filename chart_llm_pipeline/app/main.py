"""
FastAPI entrypoint.

Routes:
- POST /api/charts/generate -> PNG image of the recommended chart
- POST /api/charts/analyze  -> the ChartAnalysis as JSON, without rendering
- GET  /health              -> liveness check
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import Response

from .analyzer import analyze, generate_chart
from .config import get_settings
from .llm_client import LLMClient
from .outcomes import RenderFailure
from .schemas import ChartAnalysis, ChartRequest, HealthResponse

app = FastAPI(
    title="Chart Generation LLM API",
    version="1.0",
    description=(
        "REST API that accepts JSON data, uses an LLM to analyze it and recommend an "
        "appropriate chart, then generates and returns the chart image"
    ),
    contact={"name": "API Support", "email": "support@example.com"},
)


def get_llm_client() -> LLMClient:
    return LLMClient(get_settings())


@app.post(
    "/api/charts/generate",
    tags=["Chart Generator"],
    summary="Generate a chart image from JSON data",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}, "description": "Chart image generated successfully"},
        500: {"description": "Chart image could not be rendered"},
    },
)
async def generate_endpoint(chart_request: ChartRequest, client: LLMClient = Depends(get_llm_client)):
    logger.info(f"Received chart generation request: title={chart_request.title!r} chart_type={chart_request.chart_type!r}")
    try:
        image = await generate_chart(chart_request, client)
    except RenderFailure as e:
        logger.error(f"Error generating chart: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return Response(content=image, media_type="image/png")


@app.post(
    "/api/charts/analyze",
    tags=["Chart Generator"],
    summary="Analyze JSON data with LLM",
    response_model=ChartAnalysis,
)
async def analyze_endpoint(chart_request: ChartRequest, client: LLMClient = Depends(get_llm_client)):
    logger.info(f"Received data analysis request: title={chart_request.title!r}")
    return await analyze(chart_request, client)


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse()
