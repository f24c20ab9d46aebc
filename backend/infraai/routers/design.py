"""
System design endpoint: credit check, AI analysis, credit settlement.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from infraai.dependencies import get_design_service
from infraai.errors import (
    AccountNotFoundError,
    ConfigurationError,
    InsufficientCreditsError,
    InvalidRequestError,
    UpstreamAuthError,
)
from infraai.models import SystemDesignResponse
from infraai.routers.auth import get_current_user_id
from infraai.services.orchestrator import DesignService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["design"])


async def _request_text(http_request: Request) -> Any:
    """The raw `request` value from the JSON body, or None if there is none."""
    try:
        body = await http_request.json()
    except ValueError:
        return None
    return body.get("request") if isinstance(body, dict) else None


@router.post("/system-design", response_model=SystemDesignResponse)
async def system_design(
    http_request: Request,
    user_id: str = Depends(get_current_user_id),
    service: DesignService = Depends(get_design_service),
) -> SystemDesignResponse:
    """
    Answer a chat message, producing a diagram recommendation when the
    message is a system design request.

    Body: {"request": "<message>"}, checked only after the credit lookup.

    - 404 if the user has no credit account
    - 403 if the user has no credits left
    - 400 if `request` is missing, not a string, or blank
    - One credit is spent only when a structured recommendation is returned
    """
    user_request = await _request_text(http_request)
    try:
        return await service.handle(user_id, user_request)
    except AccountNotFoundError:
        raise HTTPException(status_code=404, detail="User credits not found.")
    except InsufficientCreditsError:
        logger.info(f"Credits exhausted for {user_id[:8]}...")
        raise HTTPException(
            status_code=403,
            detail="You have used all your system design credits.",
        )
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except UpstreamAuthError as e:
        logger.error(f"Upstream auth error: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"System design request failed for {user_id[:8]}...: {e}")
        raise HTTPException(status_code=500, detail="Internal server error.")
