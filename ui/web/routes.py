"""
Web Routes - API endpoints and page routes
=========================================

This module defines the web routes of the assistant: the chat page,
stateless replies, chat sessions, the rule table and interview prep.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from core.logging import get_logger, set_log_context, clear_log_context
from core.exceptions import (
    ChatError,
    SessionBusyError,
    InterviewPrepError,
    LLMError,
)
from services.interview_prep import InterviewPrepRequest

logger = get_logger("web.routes")

router = APIRouter()


# === Page Routes ===

@router.get("/", response_class=HTMLResponse)
async def chat_page(request: Request):
    """Render the chat page."""
    templates = request.app.state.templates
    config = request.app.state.config

    return templates.TemplateResponse(
        request,
        "chat.html",
        {
            "app_name": config.app_name,
            "interview_enabled": request.app.state.interview_service is not None,
        }
    )


# === API Models ===

class ChatMessage(BaseModel):
    """Chat message model."""
    message: str


class InterviewPrepBody(BaseModel):
    """Interview prep request model (camelCase aliases accepted)."""
    action: str
    job_title: str = Field("", alias="jobTitle")
    company: str = ""
    industry: str = ""
    experience: str = ""
    job_description: str = Field("", alias="jobDescription")
    question_type: str = Field("mixed", alias="questionType")
    question: str = ""
    response: str = ""
    user_question: str = Field("", alias="userQuestion")

    model_config = {"populate_by_name": True}


# === Chat API ===

@router.post("/api/respond")
async def respond(request: Request, body: ChatMessage):
    """Answer one message immediately, without a session or typing delay."""
    matcher = request.app.state.matcher

    match = matcher.match(body.message)
    return {
        "response": match.response if match else matcher.fallback(),
        "matched_rule": match.rule.name if match else None,
    }


@router.post("/api/chat/sessions", status_code=201)
async def create_session(request: Request):
    """Start a new chat session."""
    session = request.app.state.sessions.create()
    return session.to_dict()


def _get_session(request: Request, session_id: str):
    session = request.app.state.sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Chat session not found")
    return session


@router.get("/api/chat/sessions/{session_id}")
async def get_session(request: Request, session_id: str):
    """Get a session transcript."""
    return _get_session(request, session_id).to_dict()


@router.post("/api/chat/sessions/{session_id}/messages")
async def send_message(request: Request, session_id: str, body: ChatMessage):
    """Send a message and wait for the assistant reply."""
    session = _get_session(request, session_id)

    token = set_log_context(session_id=session_id)
    try:
        reply = await session.submit(body.message)
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except ChatError as e:
        raise HTTPException(status_code=400, detail=e.message)
    finally:
        clear_log_context(token)

    return {"session_id": session_id, "reply": reply.to_dict()}


@router.delete("/api/chat/sessions/{session_id}")
async def delete_session(request: Request, session_id: str):
    """End a chat session."""
    if not request.app.state.sessions.remove(session_id):
        raise HTTPException(status_code=404, detail="Chat session not found")
    return {"success": True}


@router.get("/api/rules")
async def list_rules(request: Request):
    """Get the rule table in evaluation order."""
    return request.app.state.matcher.table.to_dict()


# === Interview Prep API ===

@router.post("/api/interview-prep")
async def interview_prep(request: Request, body: InterviewPrepBody):
    """Run an interview preparation action through the LLM."""
    service = request.app.state.interview_service
    if service is None:
        raise HTTPException(status_code=503, detail="Interview prep is not configured")

    prep_request = InterviewPrepRequest(**body.model_dump())

    try:
        result = await service.run_async(prep_request)
    except InterviewPrepError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except LLMError as e:
        logger.error(f"Interview prep failed: {e}")
        raise HTTPException(status_code=502, detail=e.message)

    return result.to_dict()


@router.get("/api/status")
async def get_status(request: Request):
    """Get system status."""
    config = request.app.state.config
    matcher = request.app.state.matcher
    service = request.app.state.interview_service

    return {
        "app_name": config.app_name,
        "version": config.version,
        "rules": len(matcher.rules),
        "fallbacks": len(matcher.fallbacks),
        "sessions": len(request.app.state.sessions),
        "interview_prep": {
            "enabled": service is not None,
            "provider": config.llm.provider if service is not None else None,
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
