"""Tests for the agent registry."""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from agent_bridge.agents import (
    AgentNotFoundError,
    AgentRegistry,
    AgentStatus,
    Capabilities,
    CLIAgent,
    CustomAgent,
    PromptDelivery,
    PromptMethod,
    create_default_registry,
)


class TestRegistration:
    """Tests for register/get/require."""

    def test_register_and_get(
        self, registry: AgentRegistry, make_agent: Callable[..., CLIAgent]
    ) -> None:
        """Registered agents are found by name."""
        agent = make_agent(name="alpha")
        registry.register(agent)
        assert registry.get("alpha") is agent
        assert "alpha" in registry
        assert len(registry) == 1

    def test_get_unknown(self, registry: AgentRegistry) -> None:
        """get returns None for unknown names."""
        assert registry.get("missing") is None
        assert "missing" not in registry

    def test_require_unknown(
        self, registry: AgentRegistry, make_agent: Callable[..., CLIAgent]
    ) -> None:
        """require raises with the available names."""
        registry.register(make_agent(name="beta"))
        registry.register(make_agent(name="alpha"))
        with pytest.raises(AgentNotFoundError) as exc_info:
            registry.require("gamma")
        assert exc_info.value.name == "gamma"
        assert exc_info.value.available == ["alpha", "beta"]
        assert "alpha, beta" in str(exc_info.value)

    def test_last_registration_wins(
        self, registry: AgentRegistry, make_agent: Callable[..., CLIAgent]
    ) -> None:
        """Re-registering a name replaces the previous agent."""
        first = make_agent(name="alpha", flag="-a")
        second = make_agent(name="alpha", flag="-b")
        registry.register(first)
        registry.register(second)
        assert registry.get("alpha") is second
        assert registry.names() == ["alpha"]

    def test_names_sorted(
        self, registry: AgentRegistry, make_agent: Callable[..., CLIAgent]
    ) -> None:
        """names() is sorted regardless of insertion order."""
        for name in ["zeta", "alpha", "mid"]:
            registry.register(make_agent(name=name))
        assert registry.names() == ["alpha", "mid", "zeta"]

    def test_custom_agent_registration(self, registry: AgentRegistry) -> None:
        """Custom agents register under their own name."""
        registry.register(CustomAgent.from_template("aider {{PROMPT}}", name="aider"))
        assert registry.names() == ["aider"]


class TestFiltering:
    """Tests for available() and automatable()."""

    def test_available(
        self,
        registry: AgentRegistry,
        make_agent: Callable[..., CLIAgent],
        clean_agent_env: pytest.MonkeyPatch,
    ) -> None:
        """Only agents passing validation are listed."""
        present = make_agent(name="present", command=sys.executable)
        nokey = make_agent(
            name="nokey", command=sys.executable, required_env=("OPENAI_API_KEY",)
        )
        registry.register(present)
        registry.register(make_agent(name="absent", command="definitely-not-installed-x"))
        registry.register(nokey)
        assert registry.available() == [present]

        clean_agent_env.setenv("OPENAI_API_KEY", "sk-test")
        assert registry.available() == [nokey, present]

    def test_automatable_requires_validation(
        self, registry: AgentRegistry, make_agent: Callable[..., CLIAgent]
    ) -> None:
        """An automatable agent whose CLI is missing is not listed."""
        registry.register(
            make_agent(name="ghost", command="definitely-not-installed-x", automatable=True)
        )
        assert registry.available() == []
        assert registry.automatable() == []

    def test_validity_automatable_matrix(
        self, registry: AgentRegistry, make_agent: Callable[..., CLIAgent]
    ) -> None:
        """Each accessor returns exactly its subset, sorted by name."""
        agents: dict[str, CLIAgent] = {}
        for i, name in enumerate(["h", "g", "f", "e", "d", "c", "b", "a"]):
            valid = i % 2 == 0
            automatable = (i // 2) % 2 == 0
            command = sys.executable if valid else "definitely-not-installed-x"
            agents[name] = make_agent(name=name, command=command, automatable=automatable)
            registry.register(agents[name])

        # valid: h f d b; automatable: h g d c
        assert registry.available() == [agents[n] for n in ["b", "d", "f", "h"]]
        assert registry.automatable() == [agents[n] for n in ["d", "h"]]
        available = registry.available()
        assert all(agent in available for agent in registry.automatable())

    def test_empty(self, registry: AgentRegistry) -> None:
        """An empty registry lists nothing."""
        assert registry.names() == []
        assert registry.available() == []
        assert registry.automatable() == []
        assert registry.doctor() == []


class TestDoctor:
    """Tests for doctor()."""

    def test_statuses(
        self, registry: AgentRegistry, make_agent: Callable[..., CLIAgent]
    ) -> None:
        """doctor reports valid agents with versions and invalid ones with errors."""
        registry.register(make_agent(name="python", command=sys.executable))
        registry.register(make_agent(name="absent", command="definitely-not-installed-x"))

        absent, python = registry.doctor()

        assert isinstance(absent, AgentStatus)
        assert absent.name == "absent"
        assert absent.installed is False
        assert absent.valid is False
        assert absent.version == ""
        assert "not found in PATH" in absent.error

        assert python.name == "python"
        assert python.installed is True
        assert python.valid is True
        assert python.version.startswith("Python 3.")
        assert python.error == ""

    def test_custom_agent_version(self, registry: AgentRegistry) -> None:
        """Custom agents report the fixed "custom" version."""
        registry.register(CustomAgent.from_template(f"{sys.executable} {{{{PROMPT}}}}"))
        (status,) = registry.doctor()
        assert status.valid is True
        assert status.version == "custom"

    @pytest.mark.skipif(sys.platform == "win32", reason="requires POSIX false")
    def test_failed_version_probe(self, registry: AgentRegistry) -> None:
        """A failing version probe leaves the version empty but the agent valid."""
        caps = Capabilities(prompt_delivery=PromptDelivery(method=PromptMethod.POSITIONAL))
        registry.register(CLIAgent(name="false", command="false", capabilities=caps))
        (status,) = registry.doctor()
        assert status.valid is True
        assert status.version == ""


class TestDefaultRegistry:
    """Tests for create_default_registry()."""

    def test_contains_builtins(self) -> None:
        """All six built-in agents are registered."""
        assert create_default_registry().names() == [
            "claude",
            "cline",
            "codex",
            "gemini",
            "goose",
            "opencode",
        ]

    def test_independent_instances(self) -> None:
        """Each call returns a fresh registry."""
        first = create_default_registry()
        second = create_default_registry()
        assert first is not second
        assert first.get("claude") is not second.get("claude")

    def test_all_builtins_automatable(self, default_registry: AgentRegistry) -> None:
        """Every built-in agent can run headless."""
        for name in default_registry.names():
            assert default_registry.require(name).capabilities.automatable is True

    @pytest.mark.skipif(sys.platform == "win32", reason="requires POSIX shell scripts")
    def test_installed_builtins_automatable(
        self,
        default_registry: AgentRegistry,
        tmp_path: Path,
        clean_agent_env: pytest.MonkeyPatch,
    ) -> None:
        """With every CLI on PATH and its keys set, all built-ins are listed."""
        for name in default_registry.names():
            script = tmp_path / name
            script.write_text("#!/bin/sh\nexit 0\n")
            script.chmod(0o755)
        clean_agent_env.setenv("PATH", str(tmp_path))
        clean_agent_env.setenv("OPENAI_API_KEY", "sk-test")
        clean_agent_env.setenv("GEMINI_API_KEY", "gm-test")

        automatable = [agent.name for agent in default_registry.automatable()]
        assert automatable == default_registry.names()

        clean_agent_env.delenv("GEMINI_API_KEY")
        assert "gemini" not in [agent.name for agent in default_registry.automatable()]


class TestConcurrency:
    """Thread-safety of the registry."""

    def test_concurrent_access(
        self, registry: AgentRegistry, make_agent: Callable[..., CLIAgent]
    ) -> None:
        """Concurrent register/get/names calls neither fail nor lose entries."""
        agents = [make_agent(name=f"agent{i}") for i in range(100)]
        errors: list[BaseException] = []

        def reader(i: int) -> None:
            registry.get(f"agent{i}")
            names = registry.names()
            assert names == sorted(names)

        with ThreadPoolExecutor(max_workers=16) as pool:
            futures = [pool.submit(registry.register, agent) for agent in agents]
            futures += [pool.submit(reader, i) for i in range(100)]
            futures += [pool.submit(registry.automatable) for _ in range(100)]
            for future in futures:
                exc = future.exception()
                if exc is not None:
                    errors.append(exc)

        assert errors == []
        assert len(registry) == 100
        assert registry.names() == sorted(agent.name for agent in agents)

    def test_writer_not_starved(
        self, registry: AgentRegistry, make_agent: Callable[..., CLIAgent]
    ) -> None:
        """Registration completes while readers keep hammering the registry."""
        stop = threading.Event()

        def hammer() -> None:
            while not stop.is_set():
                registry.names()

        readers = [threading.Thread(target=hammer) for _ in range(8)]
        for thread in readers:
            thread.start()
        try:
            done = threading.Event()

            def write() -> None:
                registry.register(make_agent(name="late"))
                done.set()

            threading.Thread(target=write).start()
            assert done.wait(timeout=5)
        finally:
            stop.set()
            for thread in readers:
                thread.join()

        assert "late" in registry
