"""
OpenAI proxy endpoints - keep the API key on the server
"""
import json
import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from menu_backend.services.openai_service import OpenAIService, get_openai_service

logger = logging.getLogger(__name__)

router = APIRouter()

NO_KEY_ERROR = "OpenAI API key is not configured"
UPSTREAM_ERROR = "Er is iets misgegaan met de OpenAI API"


async def _read_body(request: Request):
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


async def _forward(payload, llm: OpenAIService) -> JSONResponse:
    try:
        status_code, data = await llm.forward(payload)
    except httpx.HTTPError as e:
        logger.error(f"OpenAI upstream unreachable: {e}")
        return JSONResponse(status_code=502, content={"error": UPSTREAM_ERROR})
    if status_code >= 400:
        logger.warning(f"OpenAI upstream returned {status_code}")
    return JSONResponse(status_code=status_code, content=data)


@router.post("/chat")
async def chat_proxy(request: Request, llm: OpenAIService = Depends(get_openai_service)):
    """Forward a chat-completions body as-is"""
    if not llm.is_available:
        return JSONResponse(status_code=500, content={"error": NO_KEY_ERROR})

    payload = await _read_body(request)
    if payload is None:
        return JSONResponse(status_code=400, content={"error": "Request body must be JSON"})
    return await _forward(payload, llm)


@router.post("/openai")
async def openai_proxy(request: Request, llm: OpenAIService = Depends(get_openai_service)):
    """
    Forward a chat-completions body, or answer the short form
    {"prompt": ..., "lang": ...} with {"description": ...}
    """
    if not llm.is_available:
        return JSONResponse(status_code=500, content={"error": NO_KEY_ERROR})

    payload = await _read_body(request)
    if payload is None:
        return JSONResponse(status_code=400, content={"error": "Request body must be JSON"})

    if isinstance(payload, dict) and "prompt" in payload and "messages" not in payload:
        lang = payload.get("lang") or "nl"
        description = await llm.generate(str(payload["prompt"]), lang=lang)
        return {"description": description}

    return await _forward(payload, llm)
