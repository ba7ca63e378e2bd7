"""Recover a ProjectDescriptor from raw generative-model output."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..logging import get_logger
from ..models import EnvVar, FileEntry, ProjectDescriptor, ProjectKind, infer_kind
from .envelope import strip_envelope
from .repairs import (
    apply_substitutions,
    close_at_last_separator,
    close_truncated,
    repair_escapes,
)

logger = get_logger("recovery.parser")

_SNIPPET_RADIUS = 100


class RecoveryError(RuntimeError):
    """Base class for unrecoverable model output."""

    kind = "recovery"


class EmptyDocumentError(RecoveryError):
    """Raised when the input holds no payload at all."""

    kind = "empty"


class MalformedDocumentError(RecoveryError):
    """Raised when the payload still fails to parse after every repair."""

    kind = "malformed"

    def __init__(self, message: str, context_snippet: str = "") -> None:
        super().__init__(message)
        self.context_snippet = context_snippet


class NoValidFilesError(RecoveryError):
    """Raised when no file entry survives validation."""

    kind = "no_valid_files"


def recover(raw_text: str) -> ProjectDescriptor:
    """Parse *raw_text* into a ProjectDescriptor, repairing it where possible."""
    if raw_text is None or not raw_text.strip():
        raise EmptyDocumentError("Model output is empty")

    payload = strip_envelope(raw_text)
    if not payload:
        raise EmptyDocumentError("Model output contained no payload inside its fencing")

    logger.debug("Recovering project from %d characters of payload", len(payload))
    data = _parse_payload(payload)
    return _build_descriptor(data, payload)


def _parse_payload(payload: str) -> Any:
    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        logger.debug("Payload is not valid JSON (%s); repairing", exc.msg)

    escaped = repair_escapes(payload)
    closed = close_truncated(escaped)
    candidate = apply_substitutions(closed)
    try:
        return json.loads(candidate, strict=False)
    except json.JSONDecodeError as exc:
        first_error = exc

    if closed != escaped:
        retry = apply_substitutions(close_at_last_separator(escaped))
        try:
            return json.loads(retry, strict=False)
        except json.JSONDecodeError:
            logger.debug("Separator-based truncation repair also failed")

    snippet = _context_snippet(candidate, first_error.pos)
    logger.warning("Unable to parse model output: %s", first_error.msg)
    raise MalformedDocumentError(
        f"{first_error.msg} at offset {first_error.pos}", context_snippet=snippet
    )


def _context_snippet(text: str, position: int) -> str:
    start = max(0, position - _SNIPPET_RADIUS)
    return text[start : position + _SNIPPET_RADIUS]


def _build_descriptor(data: Any, payload: str) -> ProjectDescriptor:
    if not isinstance(data, dict):
        raise MalformedDocumentError(
            "Root of the document is not an object", context_snippet=payload[: 2 * _SNIPPET_RADIUS]
        )

    name = data.get("projectName", data.get("name"))
    if not isinstance(name, str) or not name.strip():
        raise MalformedDocumentError(
            "Document is missing a project name", context_snippet=payload[: 2 * _SNIPPET_RADIUS]
        )

    files, dropped = _collect_files(data.get("files"))
    if dropped:
        logger.info("Dropped %d file entries without a string path and content", dropped)
    if not files:
        raise NoValidFilesError("Document contains no valid file entries")

    kind_value = data.get("projectType", data.get("kind"))
    kind = ProjectKind.FULL_STACK if kind_value == ProjectKind.FULL_STACK.value else ProjectKind.STATIC
    description = data.get("description")
    setup = data.get("setupInstructions", data.get("setupSteps"))

    descriptor = ProjectDescriptor(
        name=name.strip(),
        files=tuple(files),
        description=description if isinstance(description, str) else "",
        kind=kind,
        dependencies=_as_str_pairs(data.get("dependencies")),
        dev_dependencies=_as_str_pairs(data.get("devDependencies")),
        env_vars=tuple(_collect_env_vars(data.get("envVars"))),
        setup_steps=tuple(item for item in _as_list(setup) if isinstance(item, str)),
    )
    logger.info("Recovered project %r with %d files", descriptor.name, len(descriptor.files))
    return descriptor


def _collect_files(value: Any) -> Tuple[List[FileEntry], int]:
    files: List[FileEntry] = []
    dropped = 0
    for item in _as_list(value):
        if not isinstance(item, dict):
            dropped += 1
            continue
        path = item.get("path")
        content = item.get("content")
        if not isinstance(path, str) or not isinstance(content, str):
            dropped += 1
            continue
        normalised = _normalise_path(path)
        if not normalised:
            dropped += 1
            continue
        files.append(FileEntry(path=normalised, content=content, inferred_kind=infer_kind(normalised)))
    return files, dropped


def _normalise_path(path: str) -> str:
    normalised = path.strip().replace("\\", "/")
    while normalised.startswith("./"):
        normalised = normalised[2:]
    return normalised.lstrip("/")


def _collect_env_vars(value: Any) -> List[EnvVar]:
    if isinstance(value, dict):
        value = [
            {"key": key, "description": description if isinstance(description, str) else ""}
            for key, description in value.items()
        ]
    env_vars: List[EnvVar] = []
    for item in _as_list(value):
        if not isinstance(item, dict):
            continue
        key = item.get("key")
        if not isinstance(key, str) or not key.strip():
            continue
        description = item.get("description")
        example = item.get("example")
        env_vars.append(
            EnvVar(
                key=key.strip(),
                description=description if isinstance(description, str) else "",
                example=_as_optional_str(example),
                required=item.get("required") is True,
            )
        )
    return env_vars


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_optional_str(value: Any) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def _as_str_pairs(value: Any) -> Tuple[Tuple[str, str], ...]:
    if not isinstance(value, Mapping):
        return ()
    result: Dict[str, str] = {}
    for key, version in value.items():
        if not isinstance(key, str) or isinstance(version, bool):
            continue
        if isinstance(version, (str, int, float)):
            result[key] = str(version)
    return tuple(result.items())


def render_project(descriptor: ProjectDescriptor) -> str:
    """Serialise *descriptor* back to the envelope format ``recover`` accepts."""
    env_vars = []
    for env_var in descriptor.env_vars:
        entry: Dict[str, Any] = {
            "key": env_var.key,
            "description": env_var.description,
            "required": env_var.required,
        }
        if env_var.example is not None:
            entry["example"] = env_var.example
        env_vars.append(entry)

    payload = {
        "projectName": descriptor.name,
        "description": descriptor.description,
        "projectType": descriptor.kind.value,
        "dependencies": dict(descriptor.dependencies),
        "devDependencies": dict(descriptor.dev_dependencies),
        "envVars": env_vars,
        "files": [{"path": entry.path, "content": entry.content} for entry in descriptor.files],
        "setupInstructions": list(descriptor.setup_steps),
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


__all__ = [
    "EmptyDocumentError",
    "MalformedDocumentError",
    "NoValidFilesError",
    "RecoveryError",
    "recover",
    "render_project",
]
