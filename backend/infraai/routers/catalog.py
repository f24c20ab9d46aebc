"""
Read-only catalog endpoints used by the canvas and the chat box.
"""

from typing import Any

from fastapi import APIRouter, Depends

from infraai.dependencies import get_catalog_components
from infraai.services.catalog import DESIGN_PROMPTS

router = APIRouter(tags=["catalog"])


@router.get("/components")
async def list_components(catalog=Depends(get_catalog_components)) -> dict[str, Any]:
    """All catalog components, in catalog order."""
    return {"components": [component.model_dump() for component in catalog]}


@router.get("/design-prompts")
async def list_design_prompts() -> dict[str, Any]:
    """Sample design requests offered above the chat input."""
    return {"prompts": [prompt.model_dump() for prompt in DESIGN_PROMPTS]}
