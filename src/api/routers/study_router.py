"""
Study router: the five Generation Gateway proxy endpoints.

Endpoints for:
- Quiz generation from notes
- Summaries
- Quiz feedback (local score verified against the model's feedback)
- Topic extraction
- Chat assistant

Every failure is returned as {"error": message}: 400 for missing input,
500 with a generic message for gateway or parse failures.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from pydantic import BaseModel, Field

from src.api.dependencies import get_gateway
from src.core.errors import GatewayError, MalformedResponse, ValidationError
from src.gateway import GenerationGateway
from src.quiz import QuizQuestion, reconcile_feedback, score

router = APIRouter()


# ========================================
# Request/Response Models
# ========================================


class GenerateQuizRequest(BaseModel):
    """Request model for quiz generation."""

    # Untyped so a non-string gets the same 400 message as a missing field
    notes: Any = Field(None, description="Notes or extracted PDF text")


class GenerateQuizResponse(BaseModel):
    questions: List[QuizQuestion]


class TextRequest(BaseModel):
    """Request model for summary and topic extraction."""

    text: Any = Field(None, description="Source text")


class SummaryResponse(BaseModel):
    summary: str


class TopicsResponse(BaseModel):
    topics: List[str]


class QuizFeedbackRequest(BaseModel):
    """Request model for quiz feedback."""

    questions: Optional[List[QuizQuestion]] = Field(None, description="The quiz that was taken")
    userAnswers: Optional[Dict[str, Optional[str]]] = Field(
        None, description="Question index -> selected choice key"
    )


class FeedbackEntry(BaseModel):
    topic: str
    question: str
    user_answer: Optional[str]
    correct_answer: str
    is_correct: bool
    explanation: str


class FeedbackScoreResponse(BaseModel):
    correct: int
    total: int
    percentage: float
    summary: str
    verified: bool = Field(..., description="False when the model's numbers disagreed with the local score")


class QuizFeedbackResponse(BaseModel):
    feedback: List[FeedbackEntry]
    score: FeedbackScoreResponse


class ChatRequest(BaseModel):
    message: Any = None
    systemInstruction: Optional[str] = None


class ChatResponse(BaseModel):
    reply: str


def _parse_answers(raw: Dict[str, Optional[str]], total: int) -> Dict[int, str]:
    """Convert JSON object keys ("0", "1", ...) to question indices."""
    answers: Dict[int, str] = {}
    for key, value in raw.items():
        try:
            index = int(key)
        except ValueError:
            raise ValidationError(f"Invalid question index: {key!r}") from None
        if not 0 <= index < total:
            raise ValidationError(f"Question index out of range: {index}")
        if value is not None and value.strip():
            answers[index] = value
    return answers


# ========================================
# Endpoints
# ========================================


@router.post(
    "/generate-quiz",
    response_model=GenerateQuizResponse,
    summary="Generate a multiple-choice quiz from notes",
)
async def generate_quiz(
    request: GenerateQuizRequest,
    gateway: GenerationGateway = Depends(get_gateway),
) -> GenerateQuizResponse:
    try:
        questions = await gateway.generate_quiz(request.notes)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except MalformedResponse:
        raise HTTPException(status_code=500, detail="Failed to parse the generated quiz.")
    except GatewayError:
        raise HTTPException(status_code=500, detail="Failed to generate quiz.")

    return GenerateQuizResponse(questions=questions)


@router.post(
    "/summary",
    response_model=SummaryResponse,
    summary="Summarize notes or PDF text",
)
async def summarize(
    request: TextRequest,
    gateway: GenerationGateway = Depends(get_gateway),
) -> SummaryResponse:
    try:
        summary = await gateway.summarize(request.text)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except GatewayError:
        raise HTTPException(status_code=500, detail="Failed to generate summary.")

    return SummaryResponse(summary=summary)


@router.post(
    "/quiz-feedback",
    response_model=QuizFeedbackResponse,
    summary="Score a quiz and get explanations",
)
async def quiz_feedback(
    request: QuizFeedbackRequest,
    gateway: GenerationGateway = Depends(get_gateway),
) -> QuizFeedbackResponse:
    """
    Score the answers locally, then ask the model for richer feedback.

    The model's numbers are checked against the local score; the response
    always carries the local numbers and `score.verified` reports whether
    the model agreed.
    """
    if not request.questions or request.userAnswers is None:
        raise HTTPException(status_code=400, detail="Questions and answers required")

    try:
        answers = _parse_answers(request.userAnswers, len(request.questions))
        result = score(request.questions, answers)
        feedback = await gateway.score_quiz(request.questions, answers)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except GatewayError:
        raise HTTPException(status_code=500, detail="Failed to get feedback")

    reconciled = reconcile_feedback(result, feedback)
    if not reconciled.verified:
        logger.warning(f"Quiz feedback returned with {len(reconciled.mismatches)} corrected field(s)")
    return QuizFeedbackResponse.model_validate(reconciled.to_dict())


@router.post(
    "/list-topics",
    response_model=TopicsResponse,
    summary="Extract main topics and sub-topics",
)
async def list_topics(
    request: TextRequest,
    gateway: GenerationGateway = Depends(get_gateway),
) -> TopicsResponse:
    try:
        topics = await gateway.extract_topics(request.text)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except GatewayError:
        raise HTTPException(status_code=500, detail="Failed to extract topics.")

    return TopicsResponse(topics=topics)


@router.post(
    "/chatbot",
    response_model=ChatResponse,
    summary="Ask the study assistant",
)
async def chatbot(
    request: ChatRequest,
    gateway: GenerationGateway = Depends(get_gateway),
) -> ChatResponse:
    """Reply is markdown; rendering is up to the client."""
    try:
        reply = await gateway.chat(request.message, request.systemInstruction)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except GatewayError:
        raise HTTPException(status_code=500, detail="Failed to get chatbot response.")

    return ChatResponse(reply=reply)
