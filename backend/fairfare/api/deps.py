"""
FastAPI dependencies.

WHAT: Accessors for objects built at startup
WHY: Endpoints receive the pipeline and settings by injection, tests override them
HOW: Read from app.state populated in the lifespan handler
"""

from fastapi import Request

from ..core.config import Settings
from ..llm.provider import LLMProvider
from ..services.negotiation_pipeline import NegotiationPipeline


def get_pipeline(request: Request) -> NegotiationPipeline:
    return request.app.state.pipeline


def get_provider(request: Request) -> LLMProvider:
    return request.app.state.provider


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
