"""Persisted session snapshot."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ..exceptions import CaseContextError, SnapshotError
from ..models.case import CaseContext
from ..models.message import Message
from ..models.roles import Phase


@dataclass
class SessionSnapshot:
    """Everything needed to resume a session.

    A snapshot with no phase describes a session that was never started.
    """

    id: str
    title: str
    context: CaseContext
    messages: list[Message] = field(default_factory=list)
    phase: Optional[Phase] = None
    turn: int = 0
    last_updated: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "config": self.context.to_dict(),
            "messages": [m.to_dict() for m in self.messages],
            "current_phase": self.phase.value if self.phase else None,
            "turn": self.turn,
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionSnapshot":
        """Create from dictionary.

        Raises:
            SnapshotError: If the snapshot is malformed
        """
        if not isinstance(data, dict):
            raise SnapshotError("Snapshot must be a mapping.")

        try:
            phase_value = data.get("current_phase")
            return cls(
                id=data["id"],
                title=data.get("title", ""),
                context=CaseContext.from_dict(data["config"]),
                messages=[Message.from_dict(m) for m in data.get("messages", [])],
                phase=Phase(phase_value) if phase_value else None,
                turn=int(data.get("turn", 0)),
                last_updated=(
                    datetime.fromisoformat(data["last_updated"])
                    if data.get("last_updated")
                    else datetime.now()
                ),
            )
        except SnapshotError:
            raise
        except (CaseContextError, KeyError, TypeError, ValueError) as e:
            raise SnapshotError(f"Malformed snapshot: {e}") from e

    def save(self, path: Optional[Path] = None) -> Path:
        """Save the snapshot as JSON."""
        if path is None:
            from ..config.settings import get_settings
            path = get_settings().sessions_dir / f"{self.id}.json"

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        return path

    @classmethod
    def load(cls, path: Path) -> "SessionSnapshot":
        """Load a snapshot from a JSON file.

        Raises:
            SnapshotError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e
        return cls.from_dict(data)
