"""
Per-request workflow: classify, then design or chat, then settle credits.

    IDLE -> CLASSIFYING -> DESIGNING_SYSTEM -> DONE
                        -> CHATTING         -> DONE
    (any unexpected exception)              -> FAILED

Credential problems escalate as ConfigurationError / UpstreamAuthError.
Every other failure degrades to a chat-style fallback message.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Sequence

from infraai.database import CreditLedger
from infraai.errors import (
    AccountNotFoundError,
    ConfigurationError,
    InsufficientCreditsError,
    InvalidRequestError,
    ParseError,
    UpstreamAuthError,
)
from infraai.models import AIRecommendation, AIResponse, SystemComponent, SystemDesignResponse
from infraai.services.llm import GenerationResult, LLMErrorKind, LLMGateway
from infraai.services.parser import parse_recommendation
from infraai.services.prompts import (
    DEFAULT_DESIGN_MESSAGE,
    FALLBACK_MESSAGE,
    SYSTEM_DESIGN_LABEL,
    build_chat_prompt,
    build_classification_prompt,
    build_design_prompt,
)

logger = logging.getLogger(__name__)


class RequestState(str, enum.Enum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    DESIGNING_SYSTEM = "designing_system"
    CHATTING = "chatting"
    DONE = "done"
    FAILED = "failed"


def _transition(current: RequestState, new: RequestState) -> RequestState:
    logger.info(f"Request state {current.value} -> {new.value}")
    return new


def _raise_for_credentials(result: GenerationResult) -> None:
    if result.error is LLMErrorKind.NOT_CONFIGURED:
        raise ConfigurationError(
            "LLM API key is not configured. Set ANTHROPIC_API_KEY in the server environment."
        )
    if result.error is LLMErrorKind.INVALID_KEY:
        raise UpstreamAuthError(
            "Invalid LLM API key. Please check your API key configuration."
        )


def is_system_design(classification: GenerationResult) -> bool:
    """Exact match on the trimmed classifier output."""
    return classification.ok and (classification.text or "").strip() == SYSTEM_DESIGN_LABEL


async def _design(
    user_request: str,
    catalog: Sequence[SystemComponent],
    gateway: LLMGateway,
) -> AIResponse:
    result = await gateway.generate(build_design_prompt(user_request, catalog))
    _raise_for_credentials(result)

    if not result.ok:
        logger.warning("Design generation unavailable, returning fallback message")
        return AIResponse(is_system_design=False, message=FALLBACK_MESSAGE)

    raw_text = result.text or ""
    try:
        parsed = parse_recommendation(raw_text, catalog)
    except ParseError as e:
        logger.warning(f"Could not parse design response: {e}")
        return AIResponse(is_system_design=True, message=raw_text.strip() or FALLBACK_MESSAGE)

    if not isinstance(parsed, AIRecommendation):
        logger.info("Design response had no JSON object, returning it as a message")
        return AIResponse(is_system_design=True, message=parsed.text or FALLBACK_MESSAGE)

    logger.info(
        f"Design '{parsed.title}' with {len(parsed.groups)} groups, "
        f"{len(parsed.connections)} connections"
    )
    return AIResponse(
        is_system_design=True,
        message=parsed.explanation or DEFAULT_DESIGN_MESSAGE,
        recommendation=parsed,
    )


async def _chat(user_request: str, gateway: LLMGateway) -> AIResponse:
    result = await gateway.generate(build_chat_prompt(user_request))
    _raise_for_credentials(result)
    return AIResponse(is_system_design=False, message=result.text or FALLBACK_MESSAGE)


async def analyze_system_request(
    user_request: str,
    catalog: Sequence[SystemComponent],
    gateway: LLMGateway,
) -> AIResponse:
    """
    Classify a user message and answer it with a design or a chat reply.

    Raises ConfigurationError / UpstreamAuthError for credential problems;
    never raises for anything else.
    """
    state = RequestState.IDLE
    try:
        state = _transition(state, RequestState.CLASSIFYING)
        classification = await gateway.generate(build_classification_prompt(user_request))
        _raise_for_credentials(classification)

        if is_system_design(classification):
            state = _transition(state, RequestState.DESIGNING_SYSTEM)
            response = await _design(user_request, catalog, gateway)
        else:
            state = _transition(state, RequestState.CHATTING)
            response = await _chat(user_request, gateway)

        _transition(state, RequestState.DONE)
        return response

    except (ConfigurationError, UpstreamAuthError):
        _transition(state, RequestState.FAILED)
        raise
    except Exception as e:
        logger.error(f"AI analysis failed in state {state.value}: {e}")
        _transition(state, RequestState.FAILED)
        return AIResponse(is_system_design=False, message=FALLBACK_MESSAGE)


class DesignService:
    """Credit-gated entry point used by the /system-design endpoint."""

    def __init__(
        self,
        ledger: CreditLedger,
        gateway: LLMGateway,
        catalog: Sequence[SystemComponent],
    ):
        self.ledger = ledger
        self.gateway = gateway
        self.catalog = catalog

    async def handle(self, user_id: str, user_request: Any) -> SystemDesignResponse:
        """
        Run one design request for a user.

        `user_request` is the raw body value and is only checked after the
        ledger lookups. Raises AccountNotFoundError, InsufficientCreditsError,
        InvalidRequestError for a missing, non-string or blank request, and
        the credential errors from analyze_system_request.
        """
        credits = await self.ledger.get_credits(user_id)
        if credits is None:
            raise AccountNotFoundError(user_id)
        if credits <= 0:
            raise InsufficientCreditsError(user_id)
        if not isinstance(user_request, str) or not user_request.strip():
            raise InvalidRequestError("Request is required")

        response = await analyze_system_request(user_request, self.catalog, self.gateway)

        if response.recommendation is not None:
            new_balance = await self.ledger.try_consume(user_id)
            if new_balance is None:
                # Another request spent the last credit while this one ran
                raise InsufficientCreditsError(user_id)
            credits = new_balance

        logger.info(
            f"User {user_id[:8]}... request done "
            f"(system_design={response.is_system_design}, credits={credits})"
        )
        return SystemDesignResponse(
            is_system_design=response.is_system_design,
            message=response.message,
            recommendation=response.recommendation,
            credits=credits,
        )
