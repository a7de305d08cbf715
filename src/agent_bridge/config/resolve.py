"""Turn a loaded configuration into an agent and execution options."""

from __future__ import annotations

from typing import Any

from agent_bridge.agents.base import Agent
from agent_bridge.agents.builtin import DEFAULT_AGENT
from agent_bridge.agents.custom import CustomAgent
from agent_bridge.agents.options import ExecOptions
from agent_bridge.agents.registry import AgentRegistry
from agent_bridge.config.models import AgentBridgeConfig
from agent_bridge.core import get_logger

logger = get_logger("config.resolve")


def resolve_agent(config: AgentBridgeConfig, registry: AgentRegistry) -> Agent:
    """
    Select the agent a configuration asks for.

    Priority: a valid custom_agent, then custom_agent_cmd, then
    agent_preset, then the default agent.

    Raises:
        AgentConfigError: If a custom agent definition is malformed.
        AgentNotFoundError: If the preset is not registered.
    """
    if config.custom_agent is not None and config.custom_agent.is_valid():
        logger.debug("Using structured custom agent %s", config.custom_agent.command)
        return CustomAgent(config.custom_agent)

    if config.custom_agent_cmd:
        logger.debug("Using custom agent template")
        return CustomAgent.from_template(config.custom_agent_cmd)

    name = config.agent_preset or DEFAULT_AGENT
    logger.debug("Using agent preset %s", name)
    return registry.require(name)


def build_exec_options(config: AgentBridgeConfig, **overrides: Any) -> ExecOptions:
    """
    Build ExecOptions from the execution section.

    Args:
        config: Loaded configuration
        **overrides: ExecOptions fields that replace configured values
            (e.g. stdout=sys.stdout, timeout=30)

    Returns:
        Options for Agent.execute
    """
    execution = config.execution
    values: dict[str, Any] = {
        "autonomous": execution.autonomous,
        "timeout": execution.timeout,
        "work_dir": execution.work_dir,
        "extra_args": tuple(execution.extra_args),
        "env": dict(execution.env),
        "use_subscription": execution.use_subscription,
    }
    values.update(overrides)
    return ExecOptions(**values)
