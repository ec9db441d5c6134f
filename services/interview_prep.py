"""
Interview Prep - Mock interview practice backed by an LLM
=========================================================

This module builds prompts for the interview preparation actions,
sends them to the configured chat-completion provider and turns the
replies into structured results. Model output is not trusted to be
valid JSON; every parser has a plain-text fallback.
"""

import json
import re
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Dict, Any, Tuple

from llm.base import BaseLLMProvider, LLMResponse, Message
from core.exceptions import InterviewPrepError
from core.logging import get_logger

logger = get_logger("services.interview_prep")

GENERATE_QUESTIONS = "generate_questions"
ANALYZE_RESPONSE = "analyze_response"
COMPANY_INSIGHTS = "company_insights"
BODY_LANGUAGE_TIPS = "body_language_tips"
WEBSITE_DOUBT = "website_doubt"

ACTIONS = (
    GENERATE_QUESTIONS,
    ANALYZE_RESPONSE,
    COMPANY_INSIGHTS,
    BODY_LANGUAGE_TIPS,
    WEBSITE_DOUBT,
)

TEMPERATURE = 0.7
MAX_TOKENS = 1500

DEFAULT_SCORE = 7

_JSON_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)
_NUMBERING = re.compile(r"^\s*\d+[.)]?\s*")


@dataclass
class InterviewPrepRequest:
    """
    Parameters of one interview preparation request.

    Only the fields needed by the chosen action are required.
    """
    action: str
    job_title: str = ""
    company: str = ""
    industry: str = ""
    experience: str = ""
    job_description: str = ""
    question_type: str = "mixed"
    question: str = ""
    response: str = ""
    user_question: str = ""


@dataclass
class InterviewQuestion:
    """A generated practice question."""
    question: str
    category: str = "general"
    difficulty: str = "medium"
    estimated_time: int = 3
    hints: List[str] = field(default_factory=list)


@dataclass
class ResponseAnalysis:
    """Feedback on a candidate's answer."""
    content_quality: int = DEFAULT_SCORE
    confidence_level: int = DEFAULT_SCORE
    sentiment: str = "positive"
    improvements: List[str] = field(default_factory=list)
    strengths: List[str] = field(default_factory=list)
    suggested_response: str = ""
    score: int = DEFAULT_SCORE


@dataclass
class InterviewPrepResult:
    """
    Result of an interview preparation request.

    Attributes:
        action (str): The action that was run
        response (str): Raw model output
        data: Parsed questions or analysis, when the action has structure
        model (str): Model that produced the output
    """
    action: str
    response: str
    data: Optional[Any] = None
    model: str = ""

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.data, list):
            data = [asdict(item) for item in self.data]
        elif self.data is not None:
            data = asdict(self.data)
        else:
            data = None
        return {"action": self.action, "response": self.response, "data": data, "model": self.model}


def build_prompts(request: InterviewPrepRequest) -> Tuple[str, str]:
    """
    Build the (system, user) prompt pair for a request.

    Raises:
        InterviewPrepError: For unknown actions or missing fields
    """
    action = request.action

    if action == GENERATE_QUESTIONS:
        _require(request, "job_title")
        system = (
            "You are an expert interview coach. Generate realistic interview questions "
            "based on the job details provided. Focus on role-specific technical skills, "
            "behavioral questions, and company culture fit. Return 5-7 questions as a JSON "
            "object {\"questions\": [...]} where each item has question, category "
            "(technical/behavioral/cultural) and difficulty."
        )
        user = (
            "Generate interview questions for:\n"
            f"Job Title: {request.job_title}\n"
            f"Company: {request.company}\n"
            f"Industry: {request.industry}\n"
            f"Experience Level: {request.experience}\n"
            f"Job Description: {request.job_description}\n"
            f"Question Type: {request.question_type or 'mixed'}"
        )

    elif action == ANALYZE_RESPONSE:
        _require(request, "question", "response")
        system = (
            "You are an interview coach analyzing a candidate's response. Provide feedback "
            "on content quality and relevance (1-10), confidence level (1-10), sentiment "
            "(positive/neutral/negative), strengths, areas for improvement and a suggested "
            "better response structure. Return the analysis as a JSON object with keys "
            "contentQuality, confidenceLevel, sentiment, strengths, improvements, "
            "suggestedResponse and score."
        )
        user = (
            "Analyze this interview response:\n"
            f"Question: {request.question}\n"
            f"Response: {request.response}\n"
            f"Job Context: {request.job_title} at {request.company}"
        )

    elif action == COMPANY_INSIGHTS:
        _require(request, "company")
        system = (
            "You are a career advisor with deep knowledge of companies and industries. "
            "Provide specific insights about the company's interview process, culture, "
            "values, and what they typically look for in candidates. Include tips for "
            "success and common interview themes."
        )
        user = (
            f"Provide interview insights for {request.company} in the "
            f"{request.industry or 'unspecified'} industry for a "
            f"{request.job_title or 'general'} position."
        )

    elif action == BODY_LANGUAGE_TIPS:
        system = (
            "You are a communication expert specializing in body language and non-verbal "
            "communication during interviews. Provide specific, actionable tips for body "
            "language, eye contact, posture, and presentation skills."
        )
        user = (
            f"Provide body language and presentation tips for a "
            f"{request.job_title or 'general'} interview"
            + (f" at {request.company}." if request.company else ".")
        )

    elif action == WEBSITE_DOUBT:
        _require(request, "user_question")
        system = (
            "You are a helpful assistant for the StudentJobs platform. Answer questions "
            "about the website, job search features, application process, and general "
            "career advice. Be informative and helpful."
        )
        user = f"User question about StudentJobs platform: {request.user_question}"

    else:
        raise InterviewPrepError("Invalid action specified", {"action": action})

    return system, user


def _require(request: InterviewPrepRequest, *names: str) -> None:
    missing = [name for name in names if not getattr(request, name).strip()]
    if missing:
        raise InterviewPrepError(
            f"Missing required field(s): {', '.join(missing)}",
            {"action": request.action}
        )


def _load_json(text: str) -> Any:
    """Decode JSON, allowing a surrounding markdown code fence."""
    fenced = _JSON_FENCE.search(text)
    if fenced:
        text = fenced.group(1)
    return json.loads(text.strip())


def parse_questions(text: str) -> List[InterviewQuestion]:
    """
    Parse generated questions.

    Accepts a JSON list or an object with a "questions" list, whose
    items are strings or objects. Anything else is read as one question
    per non-blank line, with leading numbering removed.
    """
    try:
        data = _load_json(text)
    except ValueError:
        data = None

    if isinstance(data, dict):
        data = data.get("questions")

    if isinstance(data, list):
        questions = []
        for item in data:
            if isinstance(item, str):
                questions.append(InterviewQuestion(question=item))
            elif isinstance(item, dict) and item.get("question"):
                questions.append(InterviewQuestion(
                    question=str(item["question"]),
                    category=item.get("category") or "general",
                    difficulty=item.get("difficulty") or "medium",
                    estimated_time=_as_int(
                        item.get("estimatedTime", item.get("estimated_time")), 3
                    ),
                    hints=_as_list(item.get("hints")),
                ))
        if questions:
            return questions

    return [
        InterviewQuestion(question=_NUMBERING.sub("", line).strip())
        for line in text.splitlines()
        if line.strip() and _NUMBERING.sub("", line).strip()
    ]


def parse_analysis(text: str) -> ResponseAnalysis:
    """
    Parse response feedback.

    Falls back to a neutral default analysis carrying the raw text as
    its only improvement when the model did not return a JSON object.
    """
    try:
        data = _load_json(text)
    except ValueError:
        data = None

    if not isinstance(data, dict):
        return ResponseAnalysis(improvements=[text.strip()] if text.strip() else [])

    content_quality = _as_int(data.get("contentQuality", data.get("content_quality")), DEFAULT_SCORE)
    score = data.get("score")
    return ResponseAnalysis(
        content_quality=content_quality,
        confidence_level=_as_int(
            data.get("confidenceLevel", data.get("confidence_level")), DEFAULT_SCORE
        ),
        sentiment=str(data.get("sentiment") or "positive"),
        improvements=_as_list(data.get("improvements")),
        strengths=_as_list(data.get("strengths")),
        suggested_response=str(
            data.get("suggestedResponse", data.get("suggested_response")) or ""
        ),
        score=_as_int(score, content_quality) if score is not None else content_quality,
    )


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


class InterviewPrepService:
    """
    Runs interview preparation actions against an LLM provider.

    Example:
        service = InterviewPrepService(create_llm_provider(config=config))
        result = service.run(InterviewPrepRequest(
            action="generate_questions",
            job_title="Data Analyst Intern",
            company="Acme",
        ))
        for q in result.data:
            print(q.question)
    """

    def __init__(self, provider: BaseLLMProvider):
        self.provider = provider

    def _messages(self, request: InterviewPrepRequest) -> List[Message]:
        system, user = build_prompts(request)
        logger.info(
            f"Interview prep request: {request.action}",
            extra={"job_title": request.job_title, "company": request.company}
        )
        return [Message(role="system", content=system), Message(role="user", content=user)]

    def _result(self, request: InterviewPrepRequest, reply: LLMResponse) -> InterviewPrepResult:
        if reply.was_truncated:
            logger.warning(f"Reply for {request.action} was truncated")

        if request.action == GENERATE_QUESTIONS:
            data = parse_questions(reply.content)
        elif request.action == ANALYZE_RESPONSE:
            data = parse_analysis(reply.content)
        else:
            data = None

        return InterviewPrepResult(
            action=request.action,
            response=reply.content,
            data=data,
            model=reply.model,
        )

    def run(self, request: InterviewPrepRequest) -> InterviewPrepResult:
        """
        Run one action.

        Raises:
            InterviewPrepError: For invalid requests
            LLMError: If the provider call fails
        """
        messages = self._messages(request)
        reply = self.provider.chat(messages, temperature=TEMPERATURE, max_tokens=MAX_TOKENS)
        return self._result(request, reply)

    async def run_async(self, request: InterviewPrepRequest) -> InterviewPrepResult:
        messages = self._messages(request)
        reply = await self.provider.chat_async(
            messages, temperature=TEMPERATURE, max_tokens=MAX_TOKENS
        )
        return self._result(request, reply)
