from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping

ENV_FILENAME = ".env"


def render_env(env: Mapping[str, str]) -> str:
    # KEY=value, no quoting or escaping
    return "\n".join(f"{key}={value}" for key, value in env.items())


def write_env_file(directory: Path, env: Mapping[str, str]) -> Path:
    path = Path(directory) / ENV_FILENAME
    path.write_text(render_env(env), encoding="utf-8")
    return path


def read_env_file(directory: Path) -> Dict[str, str]:
    path = Path(directory) / ENV_FILENAME
    if not path.exists():
        return {}

    env: Dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        env[key] = value
    return env
