"""
Static catalog of system-design building blocks.

Loaded once per process from a JSON document of the form
{"components": [...]}. Entries are frozen models and never mutated.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from infraai.config import get_settings
from infraai.errors import CatalogError
from infraai.models import DesignPrompt, SystemComponent

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent.parent / "data" / "system_design_components.json"

# Sample requests shown above the chat box
DESIGN_PROMPTS = (
    DesignPrompt(
        id=1,
        prompt=(
            "Design a highly scalable URL shortener like bit.ly that can handle 100M URLs "
            "per day with Redis caching, database sharding, custom domains, analytics, "
            "and rate limiting"
        ),
    ),
    DesignPrompt(
        id=2,
        prompt=(
            "Build a distributed e-commerce system supporting 1M+ products with inventory "
            "management, payment processing, order fulfillment, recommendation engine, "
            "and real-time notifications"
        ),
    ),
    DesignPrompt(
        id=3,
        prompt=(
            "Create a real-time chat application like WhatsApp with message delivery, "
            "group chats, file sharing, end-to-end encryption, offline support, and push "
            "notifications for 10M+ users"
        ),
    ),
)


def load_catalog(path: Optional[Path | str] = None) -> tuple[SystemComponent, ...]:
    """
    Read and validate a catalog file.

    Raises CatalogError if the file is unreadable, is not valid JSON,
    has an entry missing required fields, or repeats a component id.
    """
    catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH

    try:
        data = json.loads(catalog_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {catalog_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog {catalog_path} is not valid JSON: {e}") from e

    entries = data.get("components") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise CatalogError(f"Catalog {catalog_path} has no 'components' list")

    components = []
    seen_ids: set[str] = set()
    for index, entry in enumerate(entries):
        try:
            component = SystemComponent.model_validate(entry)
        except ValidationError as e:
            raise CatalogError(f"Invalid catalog entry #{index}: {e}") from e
        if component.id in seen_ids:
            raise CatalogError(f"Duplicate component id in catalog: {component.id}")
        seen_ids.add(component.id)
        components.append(component)

    logger.info(f"Loaded {len(components)} catalog components from {catalog_path}")
    return tuple(components)


@lru_cache
def get_catalog() -> tuple[SystemComponent, ...]:
    """Get the process-wide catalog (honours the CATALOG_PATH setting)."""
    return load_catalog(get_settings().catalog_path)
