"""
Credit balance endpoint.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from infraai.database import CreditLedger
from infraai.dependencies import get_ledger
from infraai.models import CreditsResponse
from infraai.routers.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["credits"])


@router.post("/credits", response_model=CreditsResponse)
async def get_credits(
    user_id: str = Depends(get_current_user_id),
    ledger: CreditLedger = Depends(get_ledger),
) -> CreditsResponse:
    """Return the caller's remaining design credits."""
    credits = await ledger.get_credits(user_id)
    if credits is None:
        raise HTTPException(status_code=404, detail="User credits not found.")

    return CreditsResponse(credits=credits)
