"""
AI-assisted content generation

Thin wrappers around the OpenAI chat completions API plus the per-user hourly
request cap. Each call reserves an AIRequest row before going upstream and
gives it back if the call fails; the cap counts those rows over the last hour.
"""
import json
import logging
import re
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

import openai
from openai import OpenAI
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .config import get_settings
from .models import AIRequest, User

logger = logging.getLogger(__name__)

ENHANCEMENT_TYPES = ("improve", "proofread", "simplify", "expand", "keywords")
TONES = ("professional", "conversational", "technical", "enthusiastic", "authoritative")

AI_WINDOW = timedelta(hours=1)

class AIServiceError(Exception):
    """Raised when the upstream AI service cannot produce a result"""

_client: Optional[OpenAI] = None

def get_openai_client() -> OpenAI:
    global _client
    if _client is None:
        settings = get_settings()
        if not settings.OPENAI_API_KEY:
            raise AIServiceError("OpenAI API key not configured")
        _client = OpenAI(api_key=settings.OPENAI_API_KEY, timeout=settings.OPENAI_TIMEOUT_SECONDS)
        logger.info("OpenAI client initialised")
    return _client

# --- Prompts ---
ENHANCE_PROMPTS = {
    "improve": (
        "You are an expert content enhancer specialized in improving portfolio text. "
        "Enhance the provided content by improving clarity, professionalism, and impact. "
        "Maintain the same overall meaning but make it more compelling.",
        "Please enhance the following portfolio content while maintaining its meaning but making it more impactful:",
    ),
    "proofread": (
        "You are a professional editor specialized in proofreading. "
        "Correct any spelling, grammar, punctuation, or syntax errors in the provided text. "
        "Maintain the original voice.",
        "Please proofread and correct the following portfolio content:",
    ),
    "simplify": (
        "You are a content simplification expert. "
        "Make the provided text more concise and easier to understand while keeping the core message intact.",
        "Please simplify the following portfolio content to make it more concise and clear:",
    ),
    "expand": (
        "You are a content development specialist. "
        "Add more detail, examples, and context to the provided text.",
        "Please expand the following portfolio content with more details and examples:",
    ),
    "keywords": (
        "You are an SEO and keyword optimization expert. "
        "Incorporate relevant industry keywords while maintaining a natural flow.",
        "Please optimize the following portfolio content with relevant industry keywords:",
    ),
}

BIO_SYSTEM_PROMPT = (
    "You are an expert professional bio writer. "
    "Create a compelling professional bio that showcases the person's skills, experience, and education. "
    "Make the bio engaging, concise, and impactful."
)

SKILLS_SYSTEM_PROMPT = (
    "You are an expert career coach and industry analyst. "
    "Recommend relevant skills for the specified job title that would make a job seeker more competitive. "
    "If the user has provided current skills, recommend complementary skills they might be missing."
)

_RETRYABLE = (openai.APIConnectionError, openai.APITimeoutError, openai.RateLimitError, openai.InternalServerError)

@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=0.5, max=10),
    retry=retry_if_exception_type(_RETRYABLE),
    reraise=True,
)
def _chat_completion(system_prompt: str, user_prompt: str, max_tokens: int) -> str:
    client = get_openai_client()
    response = client.chat.completions.create(
        model=get_settings().OPENAI_MODEL,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        temperature=0.7,
        max_tokens=max_tokens,
    )
    return response.choices[0].message.content

def complete(system_prompt: str, user_prompt: str, max_tokens: int = 1024) -> str:
    """Run a chat completion, converting upstream failures into AIServiceError"""
    try:
        content = _chat_completion(system_prompt, user_prompt, max_tokens)
    except openai.OpenAIError as e:
        logger.error(f"OpenAI request failed: {e}")
        raise AIServiceError("AI service request failed") from e
    if not content or not content.strip():
        raise AIServiceError("AI service returned an empty response")
    return content.strip()

def enhance_content(content: str, enhancement_type: str = "improve", tone: str = "professional") -> str:
    system_prompt, instruction = ENHANCE_PROMPTS[enhancement_type]
    return complete(f"{system_prompt}\nTone: {tone}", f"{instruction}\n\n{content}", max_tokens=2048)

def generate_bio(skills: List[str], experience: str, education: str, tone: str = "professional") -> str:
    user_prompt = (
        "Please generate a professional bio based on the following information:\n\n"
        f"Skills: {', '.join(skills)}\n\n"
        f"Experience:\n{experience}\n\n"
        f"Education:\n{education}\n\n"
        "The bio should be approximately 150-200 words and highlight the most impressive aspects of the person's background."
    )
    return complete(f"{BIO_SYSTEM_PROMPT}\nTone: {tone}", user_prompt)

_LIST_MARKER_RE = re.compile(r"^\s*(?:[-•*]|\d+[.)])\s*")

def parse_skill_list(text: str) -> List[str]:
    """Turn a model's list output into bare skill names"""
    skills = []
    for line in text.splitlines():
        skill = _LIST_MARKER_RE.sub("", line.strip()).strip()
        if skill:
            skills.append(skill)
    return skills

def recommend_skills(job_title: str, current_skills: Optional[List[str]] = None, experience: Optional[str] = None) -> List[str]:
    skills_list = ", ".join(current_skills) if current_skills else "None provided"
    experience_text = f"Experience:\n{experience}" if experience else "No experience information provided."
    user_prompt = (
        f"Please recommend 5-10 skills for someone pursuing a career as a {job_title}.\n\n"
        f"Current Skills: {skills_list}\n\n"
        f"{experience_text}\n\n"
        "Please provide the skills as a simple list without descriptions or explanations."
    )
    return parse_skill_list(complete(SKILLS_SYSTEM_PROMPT, user_prompt))

ANALYSIS_SYSTEM_PROMPT = (
    "You are a professional career coach and portfolio expert who provides actionable feedback."
)

def analyze_portfolio(portfolio_data: dict) -> List[str]:
    """Ask for improvement suggestions on a portfolio summary, one per line"""
    summary = json.dumps({
        "title": portfolio_data.get("title"),
        "description": portfolio_data.get("description"),
        "skills": ", ".join(portfolio_data.get("skills") or []),
        "projects": portfolio_data.get("projects", 0),
        "experiences": portfolio_data.get("experiences", 0),
        "education": portfolio_data.get("educations", 0),
    })
    user_prompt = (
        f"Analyze this portfolio data and provide 5 specific improvement suggestions:\n{summary}\n\n"
        "Provide suggestions in this format:\n"
        "1. [Suggestion title]: [Brief explanation]\n"
        "2. [Suggestion title]: [Brief explanation]\n"
        "...and so on"
    )
    text = complete(ANALYSIS_SYSTEM_PROMPT, user_prompt, max_tokens=500)
    return [line.strip() for line in text.splitlines() if line.strip()]

# --- Usage cap ---
def count_recent_requests(db: Session, user_id: UUID, now: datetime = None) -> int:
    since = (now or datetime.utcnow()) - AI_WINDOW
    return db.query(AIRequest).filter(AIRequest.user_id == user_id, AIRequest.created_at >= since).count()

def reserve_request(db: Session, user_id: UUID, request_type: str, prompt_length: int) -> Optional[AIRequest]:
    """
    Claim one slot of the user's hourly allowance before calling upstream.

    The count and the pending AIRequest insert share one transaction, taken
    under a lock on the owner's row so concurrent reservations for the same
    user queue up. Returns None when the allowance is used up.
    """
    try:
        db.query(User.id).filter(User.id == user_id).with_for_update().first()
        if count_recent_requests(db, user_id) >= get_settings().AI_HOURLY_LIMIT:
            db.rollback()
            return None
        record = AIRequest(
            user_id=user_id,
            request_type=request_type,
            prompt_length=prompt_length,
            model=get_settings().OPENAI_MODEL,
        )
        db.add(record)
        db.commit()
        return record
    except SQLAlchemyError:
        db.rollback()
        raise

def complete_request(db: Session, record: AIRequest, response_length: int) -> None:
    try:
        record.response_length = response_length
        db.commit()
    except SQLAlchemyError as e:
        # the generated content was already produced; report it anyway
        db.rollback()
        logger.error(f"Failed to record AI response for request {record.id}: {e}")

def release_request(db: Session, record: AIRequest) -> None:
    """Give back a reserved slot after the upstream call failed"""
    try:
        db.delete(record)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to release AI request {record.id}: {e}")
