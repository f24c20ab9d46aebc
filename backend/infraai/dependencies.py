"""
FastAPI dependencies for the services built in the app lifespan.

Clients live on app.state; tests swap them via app.dependency_overrides.
"""

from fastapi import Depends, Request

from infraai.database import CreditLedger
from infraai.services.llm import LLMGateway
from infraai.services.orchestrator import DesignService


def get_ledger(request: Request) -> CreditLedger:
    return request.app.state.ledger


def get_gateway(request: Request) -> LLMGateway:
    return request.app.state.gateway


def get_catalog_components(request: Request):
    return request.app.state.catalog


def get_design_service(
    ledger: CreditLedger = Depends(get_ledger),
    gateway: LLMGateway = Depends(get_gateway),
    catalog=Depends(get_catalog_components),
) -> DesignService:
    return DesignService(ledger=ledger, gateway=gateway, catalog=catalog)
