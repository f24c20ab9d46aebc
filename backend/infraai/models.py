"""
Data model for catalog components and AI design recommendations.

Field aliases keep the JSON shape the frontend canvas expects
(`isSystemDesign`, connection `from`/`to`).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SystemComponent(BaseModel):
    """A catalog building block. Immutable for the process lifetime."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    inputs: list[str] = Field(default_factory=list)
    outputs: list[str] = Field(default_factory=list)
    icon: Optional[str] = None


class Position(BaseModel):
    """Advisory layout hint for the canvas."""
    x: float = 0
    y: float = 0


class ComponentGroup(BaseModel):
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None
    components: list[SystemComponent] = Field(default_factory=list)
    position: Position = Field(default_factory=Position)


class Connection(BaseModel):
    """Directed edge between two group names."""

    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(alias="from")
    target: str = Field(alias="to")
    label: Optional[str] = None


class AIRecommendation(BaseModel):
    groups: list[ComponentGroup] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)
    explanation: str = ""
    title: str = ""

    def group_names(self) -> set[str]:
        return {group.name for group in self.groups}


class AIResponse(BaseModel):
    """Envelope returned to the chat UI."""

    model_config = ConfigDict(populate_by_name=True)

    is_system_design: bool = Field(alias="isSystemDesign")
    message: str
    recommendation: Optional[AIRecommendation] = None


class SystemDesignResponse(AIResponse):
    """AI response plus the caller's balance after this call."""
    credits: int


class CreditsResponse(BaseModel):
    credits: int


class DesignPrompt(BaseModel):
    id: int
    prompt: str
