"""
Core orchestration / pipeline.

Flow:
1. Normalize the request data (mapping > labels/values > raw JSON)
2. Build a sanitized prompt and make a single LLM call
3. Interpret the answer into a ChartAnalysis
   - any gateway failure or unparseable answer -> NeedsFallback -> FallbackAnalyzer
4. Render the analysis to PNG (only rendering errors reach the caller)
"""

import logging
from typing import Union

from fastapi.concurrency import run_in_threadpool

from .fallback import fallback
from .interpreter import interpret
from .llm_client import LLMClient
from .outcomes import LLMFailure, NeedsFallback, Ok, ParseFailure
from .prompt import build_prompt
from .renderer import render
from .schemas import ChartAnalysis, ChartRequest
from .utils import resolve_data

logger = logging.getLogger(__name__)


async def recommend(prompt: str, client: LLMClient) -> Union[Ok, NeedsFallback]:
    """Ask the model for a recommendation and classify the outcome."""
    reply = await client.send(prompt)
    if isinstance(reply, LLMFailure):
        return NeedsFallback(f"{reply.kind}: {reply.detail}")

    logger.debug(f"LLM raw response: {reply[:1000]}")
    result = interpret(reply)
    if isinstance(result, ParseFailure):
        return NeedsFallback(f"ParseFailure: {result.reason}")
    return Ok(result)


async def analyze(request: ChartRequest, client: LLMClient) -> ChartAnalysis:
    """
    Produce a ChartAnalysis for the request. Never raises for LLM or parsing problems:
    those degrade to the fallback analysis.
    """
    data = resolve_data(request)
    prompt = build_prompt(
        data,
        title=request.title,
        description=request.description,
        chart_type=request.chart_type,
    )

    outcome = await recommend(prompt, client)
    if isinstance(outcome, Ok):
        logger.info(f"LLM analysis: {outcome.analysis.chart_type.value} '{outcome.analysis.title}'")
        return outcome.analysis

    return fallback(data, title=request.title, reason=outcome.reason)


async def generate_chart(request: ChartRequest, client: LLMClient) -> bytes:
    """Analyze the request and render the result; raises RenderFailure on rendering defects."""
    analysis = await analyze(request, client)
    return await run_in_threadpool(render, analysis)
