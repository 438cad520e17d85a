"""
Pydantic AI agent with workspace tools.

The agent keeps a todo list and writes files into an in-memory workspace.
File writes need human approval: when the model asks for one, the run ends
with DeferredToolRequests and the runtime pauses the thread.
"""

import logging
import time

from pydantic import BaseModel
from pydantic_ai import Agent, RunContext
from pydantic_ai.models import Model
from pydantic_ai.tools import DeferredToolRequests

from config import DEFAULT_MODEL
from config.defaults import DEFAULT_SYSTEM_PROMPT
from core.models import TodoStatus, gen_id

from .state import AgentState

logger = logging.getLogger(__name__)


class TodoItem(BaseModel):
    """A todo entry as written by the model."""

    content: str
    status: TodoStatus = "pending"
    id: str | None = None


def create_agent(
    model: Model | str | None = None,
    system_prompt: str = DEFAULT_SYSTEM_PROMPT,
) -> Agent[AgentState, str | DeferredToolRequests]:
    """
    Create the workspace agent.

    Args:
        model: Model instance or "provider:name" identifier (defaults to DEFAULT_MODEL)
        system_prompt: System prompt for the agent

    Returns:
        Agent whose output is either final text or the tool calls awaiting approval
    """
    agent: Agent[AgentState, str | DeferredToolRequests] = Agent(
        model or DEFAULT_MODEL,
        deps_type=AgentState,
        output_type=[str, DeferredToolRequests],
        system_prompt=system_prompt,
    )

    @agent.tool
    async def write_todos(ctx: RunContext[AgentState], todos: list[TodoItem]) -> str:
        """
        Replace the todo list.

        Args:
            todos: The full, updated todo list. Each item has content and a
                status of pending, in_progress, completed or cancelled.
        """
        ctx.deps.todos = [
            {"id": todo.id or gen_id("todo_"), "content": todo.content, "status": todo.status}
            for todo in todos
        ]
        logger.debug("Todo list updated: %d items", len(todos))
        return f"Updated todo list ({len(todos)} items)"

    @agent.tool(requires_approval=True)
    async def write_file(ctx: RunContext[AgentState], path: str, content: str) -> str:
        """
        Create or overwrite a file in the workspace.

        Args:
            path: File path relative to the workspace
            content: Full file content
        """
        ctx.deps.files[path] = {"content": content, "lastModified": time.time()}
        logger.debug("Wrote %s (%d chars)", path, len(content))
        return f"Wrote {len(content)} characters to {path}"

    return agent
