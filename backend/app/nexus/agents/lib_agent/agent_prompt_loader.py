"""Load agent system instructions from TOML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import tomli as toml

DEFAULT_PROMPTS_DIR = (Path(__file__).resolve().parent.parent / "prompts").resolve()


class AgentPromptLoader:
    """Helper to resolve and load the system instruction of a given agent."""

    def __init__(self, base_dir: Optional[Union[str, Path]] = None) -> None:
        """Initialize loader using a base directory for prompts (package prompts by default)."""
        self.base: Path = Path(base_dir).resolve() if base_dir else DEFAULT_PROMPTS_DIR
        self._cache: Dict[str, Dict[str, Any]] = {}

    def _path_for(self, agent_name: str) -> Path:
        """Return the TOML file path for the given agent name."""
        return self.base / f"{agent_name}_prompt.toml"

    def _load(self, agent_name: str) -> Dict[str, Any]:
        """Read and parse the TOML prompt file for an agent, once."""
        if agent_name in self._cache:
            return self._cache[agent_name]
        path = self._path_for(agent_name)
        if not path.exists():
            raise FileNotFoundError(f"Prompt file not found: {path} (cwd={Path.cwd()})")
        with path.open("rb") as f:
            data: Dict[str, Any] = toml.load(f)
        self._cache[agent_name] = data
        return data

    def get_system_prompt(self, agent_name: str) -> str:
        """Return the system instruction loaded from TOML for the agent."""
        data = self._load(agent_name)
        prompt = data.get("system") or data.get("system_prompt") or ""
        return str(prompt).strip()
