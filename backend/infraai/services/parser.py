"""
Turn the generator's free-text reply into a validated AIRecommendation.

Unresolvable components and dangling connections are dropped silently;
they are not errors.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from infraai.errors import ParseError
from infraai.models import (
    AIRecommendation,
    ComponentGroup,
    Connection,
    Position,
    SystemComponent,
)
from infraai.services.resolver import resolve_component

logger = logging.getLogger(__name__)

# Greedy: first "{" to last "}"
JSON_SPAN = re.compile(r"\{.*\}", re.DOTALL)

GROUP_SPACING_X = 400


@dataclass(frozen=True)
class RawMessage:
    """Reply with no JSON object in it; shown to the user as plain text."""
    text: str


def extract_json_span(raw_text: str) -> Optional[str]:
    match = JSON_SPAN.search(raw_text or "")
    return match.group(0) if match else None


def _component_ref(entry: Any) -> Optional[str]:
    """Components arrive as bare strings or as {"id": ...} objects."""
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        for key in ("id", "name"):
            ref = entry.get(key)
            if isinstance(ref, str) and ref.strip():
                return ref
    return None


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def build_groups(raw_groups: Any, catalog: Sequence[SystemComponent]) -> list[ComponentGroup]:
    """
    Resolve each group's components against the catalog.

    Groups are kept even when none of their components resolve. Entries
    without a string name, and repeats of a name already seen, are skipped.
    """
    if not isinstance(raw_groups, list):
        return []

    groups: list[ComponentGroup] = []
    seen_names: set[str] = set()

    for raw_group in raw_groups:
        if not isinstance(raw_group, dict):
            continue
        name = raw_group.get("name")
        if not isinstance(name, str) or not name:
            logger.debug("Dropping group without a name")
            continue
        if name in seen_names:
            logger.debug(f"Dropping duplicate group: {name}")
            continue
        seen_names.add(name)

        components = []
        raw_components = raw_group.get("components") or []
        if not isinstance(raw_components, list):
            raw_components = []
        for entry in raw_components:
            ref = _component_ref(entry)
            component = resolve_component(ref, catalog) if ref else None
            if component is None:
                logger.debug(f"Dropping unresolved component {entry!r} in group {name}")
                continue
            components.append(component)

        groups.append(
            ComponentGroup(
                name=name,
                color=_optional_str(raw_group.get("color")),
                icon=_optional_str(raw_group.get("icon")),
                components=components,
                position=Position(x=len(groups) * GROUP_SPACING_X, y=0),
            )
        )

    return groups


def validate_connections(raw_connections: Any, group_names: set[str]) -> list[Connection]:
    """Keep connections whose endpoints are known groups and which carry a label."""
    if not isinstance(raw_connections, list):
        return []

    connections = []
    for raw in raw_connections:
        if not isinstance(raw, dict):
            continue
        source = raw.get("from")
        target = raw.get("to")
        label = raw.get("label")
        if not isinstance(source, str) or not isinstance(target, str):
            continue
        if source not in group_names or target not in group_names:
            logger.debug(f"Dropping dangling connection {source!r} -> {target!r}")
            continue
        if not isinstance(label, str) or not label.strip():
            logger.debug(f"Dropping unlabelled connection {source!r} -> {target!r}")
            continue
        connections.append(Connection(source=source, target=target, label=label))

    return connections


def parse_recommendation(
    raw_text: str,
    catalog: Sequence[SystemComponent],
) -> Union[AIRecommendation, RawMessage]:
    """
    Extract and validate a recommendation from the generator's reply.

    Returns RawMessage when the reply has no {...} span. Raises ParseError
    when the span is not a JSON object.
    """
    span = extract_json_span(raw_text)
    if span is None:
        return RawMessage((raw_text or "").strip())

    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in design response: {e}") from e
    if not isinstance(data, dict):
        raise ParseError("Design response JSON is not an object")

    groups = build_groups(data.get("groups"), catalog)
    group_names = {group.name for group in groups}
    connections = validate_connections(data.get("connections"), group_names)

    explanation = data.get("explanation")
    title = data.get("title")

    return AIRecommendation(
        groups=groups,
        connections=connections,
        explanation=explanation if isinstance(explanation, str) else "",
        title=title if isinstance(title, str) else "",
    )
