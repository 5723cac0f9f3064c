"""Abstract base classes for tools."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Generic, TypeVar

from pydantic import BaseModel, Field

Req = TypeVar("Req", bound=BaseModel)
Res = TypeVar("Res", bound=BaseModel)


class ToolRequest(BaseModel):
    """Marker base class for tool requests."""


class ToolResponse(BaseModel):
    """Marker base class for tool responses."""


class TextOutput(ToolResponse):
    text: str = Field(description="Human-readable result rendered for the assistant.")


class ToolInputError(Exception):
    """Arguments are well-formed but unusable; reported back without likely causes."""


class Tool(Generic[Req, Res], ABC):
    """Abstract tool with typed request/response."""

    name: ClassVar[str]
    description: ClassVar[str]
    InputModel: ClassVar[type[Req]]
    OutputModel: ClassVar[type[Res]]

    @abstractmethod
    def execute(self, request: Req) -> Res:
        """Run the tool and return a response."""


__all__ = ["ToolRequest", "ToolResponse", "TextOutput", "ToolInputError", "Tool", "Req", "Res"]
