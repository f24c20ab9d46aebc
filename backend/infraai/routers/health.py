from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from infraai.database import CreditLedger
from infraai.dependencies import get_catalog_components, get_ledger

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    ledger: CreditLedger = Depends(get_ledger),
    catalog=Depends(get_catalog_components),
):
    """Liveness plus ledger reachability; 503 when the ledger cannot be queried."""
    ledger_ok = await ledger.ping()
    body = {
        "status": "healthy" if ledger_ok else "degraded",
        "ledger": "ok" if ledger_ok else "unreachable",
        "components": len(catalog),
    }
    return JSONResponse(status_code=200 if ledger_ok else 503, content=body)


@router.get("/")
async def root():
    """Service name and version."""
    return {"service": "InfraAI API", "version": "0.1.0"}
