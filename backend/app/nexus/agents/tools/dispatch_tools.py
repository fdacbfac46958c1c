"""Actions the orchestrator may call to hand a request to a specialized agent."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field

from nexus.agents.lib_agent.tool import ToolContext, tool
from nexus.models.message_models import Message


class CreateImageInput(BaseModel):
    """Arguments for the image dispatch action."""

    prompt: str = Field(
        ..., description="The detailed visual description of the image to generate."
    )


class SpeakTextInput(BaseModel):
    """Arguments for the speech dispatch action."""

    text: str = Field(..., description="The text to be spoken.")


class WriteCodeInput(BaseModel):
    """Arguments for the code dispatch action."""

    task_description: str = Field(..., description="The description of the coding task.")


@tool(
    name="dispatch_create_image",
    description=(
        "Routes the request to the Artist Agent to generate an image. Use this when "
        "the user asks to draw, paint, or create a picture."
    ),
    schema=CreateImageInput,
)
def dispatch_create_image(args: Dict[str, Any], ctx: ToolContext) -> Message:
    return ctx.specialists.create_image(args["prompt"])


@tool(
    name="dispatch_speak_text",
    description=(
        "Routes the request to the Speaker Agent to convert text to audio. Use this "
        "when the user explicitly asks to 'say', 'speak', or 'read aloud' something."
    ),
    schema=SpeakTextInput,
)
def dispatch_speak_text(args: Dict[str, Any], ctx: ToolContext) -> Message:
    return ctx.specialists.speak_text(args["text"])


@tool(
    name="dispatch_write_code",
    description=(
        "Routes the request to the Expert Coder Agent. Use this for complex "
        "programming tasks, debugging, or writing complete scripts."
    ),
    schema=WriteCodeInput,
)
def dispatch_write_code(args: Dict[str, Any], ctx: ToolContext) -> Message:
    """The only dispatch action that also sees the conversation so far."""
    return ctx.specialists.write_code(args["task_description"], ctx.history)


DISPATCH_TOOLS = [dispatch_create_image, dispatch_speak_text, dispatch_write_code]
