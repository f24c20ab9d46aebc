"""
Identity provider webhook: opens a credit account for every new user.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from infraai.database import CreditLedger
from infraai.dependencies import get_ledger

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])

USER_CREATED = "user.created"


@router.post("/clerk-webhook")
async def clerk_webhook(request: Request, ledger: CreditLedger = Depends(get_ledger)):
    """
    Handle Clerk user events.

    Only `user.created` is acted on; other event types are acknowledged and
    ignored. Replayed events leave an existing balance untouched.
    """
    try:
        body = await request.json()
        event_type = body.get("type")
        logger.info(f"Webhook event received: {event_type}")

        if event_type != USER_CREATED:
            return {"message": "Ignored"}

        user_id = body["data"]["id"]
        if not isinstance(user_id, str) or not user_id:
            raise ValueError("user.created event without a user id")

        await ledger.create_account(user_id)
        return {"message": "User creation event received."}

    except Exception as e:
        logger.error(f"Webhook handling failed: {e}")
        return JSONResponse(status_code=500, content={"error": "Internal server error."})
