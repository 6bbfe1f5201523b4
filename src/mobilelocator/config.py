from __future__ import annotations

from dataclasses import asdict, dataclass, replace
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Mapping

CONFIG_DIR = Path.home() / ".mobilelocator"
CONFIG_PATH = CONFIG_DIR / "config.json"
LOCAL_CONFIG_NAME = ".mobilelocator.json"

ENV_TOP_LIMIT = "MOBILELOCATOR_TOP_LIMIT"
ENV_LOG_LEVEL = "MOBILELOCATOR_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class ToolConfig:
    top_limit: int = 5
    pretty: bool = False
    log_level: str = "WARNING"
    log_file: str = ""


def default_config_path(cwd: Path | None = None) -> Path:
    local = (cwd or Path.cwd()) / LOCAL_CONFIG_NAME
    if local.is_file():
        return local
    return CONFIG_PATH


def load_tool_config(config_path: Path | None = None) -> ToolConfig:
    path = config_path or default_config_path()
    if not path.exists() or not path.is_file():
        return ToolConfig()

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        logging.getLogger(__name__).warning("Ignoring unreadable config file at %s", path)
        return ToolConfig()

    if not isinstance(payload, dict):
        return ToolConfig()

    defaults = ToolConfig()
    return ToolConfig(
        top_limit=_positive_int(payload.get("top_limit"), defaults.top_limit),
        pretty=payload["pretty"] if isinstance(payload.get("pretty"), bool) else defaults.pretty,
        log_level=_log_level(payload.get("log_level"), defaults.log_level),
        log_file=str(payload.get("log_file") or ""),
    )


def save_tool_config(config: ToolConfig, config_path: Path | None = None) -> tuple[bool, str | None]:
    path = config_path or CONFIG_PATH

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return False, f"Could not create config folder: {exc}"

    payload = json.dumps(asdict(config), ensure_ascii=True, indent=2, sort_keys=True)
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            handle.write(payload)
            handle.flush()
            temp_path = Path(handle.name)
        temp_path.replace(path)
    except OSError as exc:
        if temp_path and temp_path.exists():
            temp_path.unlink(missing_ok=True)
        return False, f"Could not write tool config: {exc}"

    return True, None


def resolve_tool_config(
    *,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    top_limit: int | None = None,
    pretty: bool | None = None,
    log_level: str | None = None,
) -> ToolConfig:
    """Merge the config sources, highest precedence first.

    Explicit arguments (CLI flags) win over environment variables, which win
    over the config file, which wins over the defaults.
    """
    config = load_tool_config(config_path)
    env = os.environ if environ is None else environ

    env_limit = env.get(ENV_TOP_LIMIT)
    if env_limit:
        config = replace(config, top_limit=_positive_int(env_limit, config.top_limit))
    env_level = env.get(ENV_LOG_LEVEL)
    if env_level:
        config = replace(config, log_level=_log_level(env_level, config.log_level))

    if top_limit is not None:
        config = replace(config, top_limit=top_limit)
    if pretty is not None:
        config = replace(config, pretty=pretty)
    if log_level is not None:
        config = replace(config, log_level=_log_level(log_level, config.log_level))
    return config


def _positive_int(raw: object, fallback: int) -> int:
    if isinstance(raw, bool):
        return fallback
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def _log_level(raw: object, fallback: str) -> str:
    value = str(raw or "").strip().upper()
    return value if value in LOG_LEVELS else fallback
