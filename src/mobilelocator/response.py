from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TextIO


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def success_response(command: str, result: Any) -> dict[str, Any]:
    return {
        "ok": True,
        "command": command,
        "timestamp": _timestamp(),
        "result": result,
    }


def error_response(command: str, code: str, message: str, details: Any = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {
        "ok": False,
        "command": command,
        "timestamp": _timestamp(),
        "error": error,
    }


def render_response(response: dict[str, Any], *, pretty: bool) -> str:
    if pretty:
        return json.dumps(response, indent=2, ensure_ascii=False) + "\n"
    return json.dumps(response, ensure_ascii=False) + "\n"


def emit_response(
    response: dict[str, Any],
    *,
    pretty: bool,
    output: str | Path | None = None,
    stream: TextIO | None = None,
) -> str:
    rendered = render_response(response, pretty=pretty)
    target = stream or sys.stdout
    target.write(rendered)
    target.flush()

    if output:
        out_path = Path(output).expanduser().resolve()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(rendered, encoding="utf-8")
    return rendered
