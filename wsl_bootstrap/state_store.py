from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class Phase(str, enum.Enum):
    FRESH = "fresh"
    AWAITING_REBOOT = "awaiting_reboot"
    RESUMED = "resumed"
    COMPLETE = "complete"


@dataclass
class RunState:
    """Per-invocation workflow state, threaded through every step.

    has_resumed is derived from the reentry task at startup, never from the
    journal file.
    """

    has_resumed: bool = False
    need_restart: bool = False
    phase: Phase = Phase.FRESH
    completed_steps: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    install_report: Optional[Dict[str, Any]] = None
    journal_phase: Optional[str] = None
    current_step: Optional[str] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def mark_step_completed(self, step_id: str) -> None:
        if step_id not in self.completed_steps:
            self.completed_steps.append(step_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "has_resumed": self.has_resumed,
            "need_restart": self.need_restart,
            "completed_steps": list(self.completed_steps),
            "warnings": list(self.warnings),
            "install_report": self.install_report,
            "current_step": self.current_step,
            "errors": list(self.errors),
        }


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def _yaml():
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("YAML journal requested but PyYAML is not available. Use a .json path.") from e
    return yaml


def load_journal(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}

    if _detect_format(p) in {"yaml", "yml"}:
        data = _yaml().safe_load(p.read_text(encoding="utf-8")) or {}
    else:
        data = json.loads(p.read_text(encoding="utf-8"))

    if not isinstance(data, dict):
        raise ValueError(f"Journal file must be an object/dict, got {type(data)}")
    return data


def save_journal(path: str, state: RunState) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    data = state.to_dict()
    if _detect_format(p) in {"yaml", "yml"}:
        p.write_text(_yaml().safe_dump(data, sort_keys=False) + "\n", encoding="utf-8")
    else:
        p.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def clear_journal(path: str) -> None:
    p = Path(path)
    if p.exists():
        p.unlink()
        logger.info("Removed journal %s", p)


def persist(path: str, state: RunState) -> None:
    """Write the journal, or remove it once the workflow is complete."""

    if state.phase is Phase.COMPLETE:
        clear_journal(path)
    else:
        save_journal(path, state)
