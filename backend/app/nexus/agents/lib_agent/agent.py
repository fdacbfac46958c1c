"""Agent asks the model for a decision and runs the first action it requests."""

from typing import Any, Callable, Optional, Sequence

from nexus.agents.lib_agent.agent_prompt_loader import AgentPromptLoader
from nexus.agents.lib_agent.base_llm import (
    ActionCall,
    ActionRequest,
    BaseLLM,
    GenerationRequest,
    ModelReply,
)
from nexus.agents.lib_agent.errors import UnknownActionError
from nexus.agents.lib_agent.tool import ToolContext, ToolSpec, json_schema_to_gemini, tool_spec_of
from nexus.logger_config import get_logger
from nexus.models.message_models import Message

logger = get_logger(__name__)


class Agent:
    """Encapsulates model, system instruction and callable actions."""

    def __init__(
        self,
        name: str,
        llm: BaseLLM,
        model: str,
        tools: Optional[Sequence[Callable[..., Any]]] = None,
        web_search: bool = False,
        prompt_loader: Optional[AgentPromptLoader] = None,
    ):
        """Initialize the agent and register the provided actions."""
        self.name = name
        self.llm = llm
        self.model = model
        self.web_search = web_search
        self.system_prompt = (prompt_loader or AgentPromptLoader()).get_system_prompt(name)

        self.tool_specs: dict[str, ToolSpec] = {}
        for f in tools or []:
            self.add_tool(f)

    def add_tool(self, func: Callable[..., Any]) -> None:
        """Register a function marked with the @tool decorator."""
        spec = tool_spec_of(func)
        if spec.name in self.tool_specs:
            raise ValueError(f"Tool '{spec.name}' already registered")
        self.tool_specs[spec.name] = spec

    def _function_declarations(self) -> tuple[dict[str, Any], ...]:
        """Render internal tool specs into Gemini function declarations."""
        out = []
        for spec in self.tool_specs.values():
            declaration: dict[str, Any] = {
                "name": spec.name,
                "description": spec.description,
            }
            if spec.schema:
                declaration["parameters"] = json_schema_to_gemini(spec.schema)
            out.append(declaration)
        return tuple(out)

    def decide(self, prompt: str) -> ModelReply:
        """Issue the single decision request for a prompt."""
        return self.llm.generate(
            GenerationRequest(
                model=self.model,
                prompt=prompt,
                system_instruction=self.system_prompt,
                function_declarations=self._function_declarations(),
                web_search=self.web_search,
            )
        )

    def _validate_and_call_tool(self, call: ActionCall, ctx: ToolContext) -> Message:
        """Validate the arguments against the action schema (if any) and call it."""
        spec = self.tool_specs.get(call.name)
        if spec is None:
            raise UnknownActionError(call.name)
        args = dict(call.args)
        if spec.schema:
            args = spec.schema(**args).model_dump()
        return spec.func(args, ctx)

    def run_action(self, request: ActionRequest, ctx: ToolContext) -> Message:
        """Run the first requested action; any further calls are ignored."""
        call = request.first
        if len(request.calls) > 1:
            logger.info(
                "[%s] Ignoring %d extra action(s) after %s",
                self.name,
                len(request.calls) - 1,
                call.name,
            )
        logger.info("[%s] Routing to: %s", self.name, call.name)
        return self._validate_and_call_tool(call, ctx)
