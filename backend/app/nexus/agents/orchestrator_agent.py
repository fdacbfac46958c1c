"""Orchestrator: picks the specialized agent for a message or answers it directly."""

from typing import Optional, Sequence

from nexus.agents.lib_agent.agent import Agent
from nexus.agents.lib_agent.agent_prompt_loader import AgentPromptLoader
from nexus.agents.lib_agent.base_llm import ActionRequest, BaseLLM, TextReply
from nexus.agents.lib_agent.errors import UnexpectedReplyError
from nexus.agents.lib_agent.tool import ToolContext
from nexus.agents.specialists import Specialists, answer_text
from nexus.agents.tools.dispatch_tools import DISPATCH_TOOLS
from nexus.models.message_models import Message


class Router:
    """Automatic mode: one decision call, then at most one specialized call."""

    def __init__(self, agent: Agent, specialists: Specialists) -> None:
        self.agent = agent
        self.specialists = specialists

    def route(
        self,
        prompt: str,
        history: Sequence[Message] = (),
        attachment: Optional[str] = None,
    ) -> Message:
        """Return the reply for a prompt in automatic mode."""
        # An attached image always means analysis, whatever the text asks for.
        if attachment:
            return self.specialists.analyze(prompt, attachment)

        reply = self.agent.decide(prompt)
        if isinstance(reply, ActionRequest):
            ctx = ToolContext(specialists=self.specialists, history=history)
            return self.agent.run_action(reply, ctx)
        if isinstance(reply, TextReply):
            return answer_text(reply)
        raise UnexpectedReplyError(reply, "an action request or a text answer")


def build_router(
    llm: BaseLLM,
    specialists: Specialists,
    prompt_loader: Optional[AgentPromptLoader] = None,
) -> Router:
    """Wire the orchestrator agent with the dispatch actions."""
    config = specialists.config
    agent = Agent(
        name="orchestrator",
        llm=llm,
        model=config.orchestrator_model,
        tools=DISPATCH_TOOLS,
        web_search=config.enable_web_search,
        prompt_loader=prompt_loader or specialists.prompt_loader,
    )
    return Router(agent, specialists)
