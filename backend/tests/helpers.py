"""
Builders shared by the unit tests.
"""
import json
from datetime import datetime, timedelta, timezone

from jose import jwt

from infraai.config import get_settings
from infraai.services.llm import GenerationResult, LLMErrorKind

TEST_USER_ID = "user_2testUserIdForUnitTests"


def ok(text: str) -> GenerationResult:
    return GenerationResult.success(text)


def failed(kind: LLMErrorKind = LLMErrorKind.UNAVAILABLE) -> GenerationResult:
    return GenerationResult.failure(kind)


def design_json(groups=None, connections=None, title="URL Shortener", explanation="A design.") -> str:
    """Serialize a generator reply the way the model returns it."""
    return json.dumps({
        "title": title,
        "explanation": explanation,
        "groups": groups if groups is not None else [],
        "connections": connections if connections is not None else [],
    })


def make_token(user_id: str = TEST_USER_ID, expires_in: timedelta = timedelta(hours=1)) -> str:
    """Session token signed the way the identity provider would."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, settings.clerk_jwt_key, algorithm=settings.clerk_jwt_algorithm)
