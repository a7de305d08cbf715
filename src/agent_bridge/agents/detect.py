"""
Claude Code installation and authentication detection.

Detection is read-only. OAuth credentials are read from
``~/.claude/.credentials.json``, an internal Claude Code file whose format
may change; anything unexpected is treated as "no OAuth credentials".
"""

from __future__ import annotations

import json
import os
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from agent_bridge.core.logging import get_logger

logger = get_logger("agents.detect")

CLAUDE_COMMAND = "claude"
API_KEY_ENV_VAR = "ANTHROPIC_API_KEY"
VERSION_TIMEOUT = 10.0


class AuthType(str, Enum):
    """How Claude Code is authenticated."""

    OAUTH = "oauth"
    API = "api"
    NONE = "none"


@dataclass
class ClaudeAuthStatus:
    """
    Claude Code detection results.

    Attributes:
        installed: Whether the claude CLI is on PATH
        version: CLI version, "unknown" if the probe failed, empty if not installed
        auth_type: Detected authentication method
        subscription_type: Plan for OAuth auth (e.g. "max", "pro")
        api_key_set: Whether ANTHROPIC_API_KEY is set
    """

    installed: bool = False
    version: str = ""
    auth_type: AuthType = AuthType.NONE
    subscription_type: str = ""
    api_key_set: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.auth_type != AuthType.NONE

    def recommended_setup(self) -> str:
        """Human-readable setup recommendation."""
        if not self.installed:
            return "Claude Code not installed. Install from: https://claude.ai/download"
        if self.auth_type == AuthType.OAUTH:
            return f"claude preset (using {self.subscription_type} subscription)"
        if self.auth_type == AuthType.API:
            return "claude preset (using API key). Consider OAuth for better rate limits."
        return f"Run 'claude' to authenticate, or set {API_KEY_ENV_VAR}."


def default_credentials_path() -> Path:
    return Path.home() / ".claude" / ".credentials.json"


def detect_claude_auth(credentials_path: str | Path | None = None) -> ClaudeAuthStatus:
    """
    Detect Claude Code installation and authentication.

    An OAuth access token takes precedence over an API key. Token expiry is
    not checked; Claude Code refreshes tokens itself.

    Args:
        credentials_path: Credentials file to read (default
            ~/.claude/.credentials.json)

    Returns:
        Detection results
    """
    status = ClaudeAuthStatus()
    status.installed, status.version = _detect_installed()
    status.api_key_set = bool(os.environ.get(API_KEY_ENV_VAR))

    oauth = _read_oauth_credentials(
        Path(credentials_path) if credentials_path else default_credentials_path()
    )
    if oauth is not None:
        status.auth_type = AuthType.OAUTH
        status.subscription_type = str(oauth.get("subscriptionType") or "")
    elif status.api_key_set:
        status.auth_type = AuthType.API

    return status


def _detect_installed() -> tuple[bool, str]:
    if shutil.which(CLAUDE_COMMAND) is None:
        return False, ""
    try:
        completed = subprocess.run(
            [CLAUDE_COMMAND, "--version"],
            capture_output=True,
            text=True,
            timeout=VERSION_TIMEOUT,
            check=True,
            stdin=subprocess.DEVNULL,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("claude --version failed: %s", e)
        return True, "unknown"
    return True, completed.stdout.strip()


def _read_oauth_credentials(path: Path) -> dict[str, Any] | None:
    """Read the claudeAiOauth block, or None if absent or unreadable."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable credentials file %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        return None
    oauth = data.get("claudeAiOauth")
    if not isinstance(oauth, dict) or not oauth.get("accessToken"):
        return None
    return oauth
