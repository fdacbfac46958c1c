"""Action registration utilities for the routing agent."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Sequence, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:  # only for static typing; avoids runtime circular imports
    from nexus.agents.specialists import Specialists
    from nexus.models.message_models import Message


@dataclass
class ToolSpec:
    """Specification describing a registered action."""

    name: str
    description: str
    schema: Optional[type[BaseModel]]
    func: Callable[..., "Message"]


@dataclass
class ToolContext:
    """What an action may use besides its own arguments."""

    specialists: "Specialists"
    history: Sequence["Message"] = field(default_factory=tuple)


F = TypeVar("F", bound=Callable[..., Any])


def tool(
    name: str, description: str, schema: Optional[type[BaseModel]] = None
) -> Callable[[F], F]:
    """Register a function as a routing action via decorator."""

    def decorator(func: F) -> F:
        spec = ToolSpec(name=name, description=description, schema=schema, func=func)
        setattr(func, "_tool_spec", spec)
        return func

    return decorator


def tool_spec_of(func: Callable[..., Any]) -> ToolSpec:
    """Return the spec attached by @tool, failing for undecorated functions."""
    spec: Optional[ToolSpec] = getattr(func, "_tool_spec", None)
    if spec is None:
        raise ValueError(f"{getattr(func, '__name__', func)!r} is not decorated with @tool")
    return spec


def json_schema_to_gemini(schema: type[BaseModel]) -> Dict[str, Any]:
    """Render a flat pydantic model as a Gemini OBJECT schema."""
    source = schema.model_json_schema()
    properties: Dict[str, Any] = {}
    for prop_name, prop in source.get("properties", {}).items():
        rendered: Dict[str, Any] = {"type": str(prop.get("type", "string")).upper()}
        if prop.get("description"):
            rendered["description"] = prop["description"]
        properties[prop_name] = rendered
    return {
        "type": "OBJECT",
        "properties": properties,
        "required": list(source.get("required", [])),
    }
