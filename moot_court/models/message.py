"""Transcript message models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from .roles import Phase, Role


class MessageCategory(str, Enum):
    """Normalized origin of a message in persisted snapshots."""

    HUMAN = "human"
    SYSTEM = "system"
    GENERATED = "generated"


@dataclass(frozen=True)
class Attachment:
    """A file attached to a turn. Opaque to the orchestration core."""

    name: str
    mime_type: str
    data: str  # base64

    @property
    def is_image(self) -> bool:
        """Check if the attachment can be passed to a vision model."""
        return self.mime_type.startswith("image/")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"name": self.name, "mime_type": self.mime_type, "data": self.data}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Attachment":
        """Create from dictionary."""
        return cls(
            name=data["name"],
            mime_type=data.get("mime_type", "application/octet-stream"),
            data=data.get("data", ""),
        )


@dataclass(frozen=True)
class Message:
    """A single turn in the transcript. Immutable once appended."""

    role: Role
    content: str
    phase: Phase
    display_name: str = ""
    attachment: Optional[Attachment] = None
    id: str = field(default_factory=lambda: str(uuid4())[:8])
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def category(self) -> MessageCategory:
        """Normalized origin of this message."""
        if self.role == Role.USER:
            return MessageCategory.HUMAN
        if self.role == Role.SYSTEM:
            return MessageCategory.SYSTEM
        return MessageCategory.GENERATED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "id": self.id,
            "category": self.category.value,
            "role": self.role.value,
            "display_name": self.display_name,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "phase": self.phase.value,
        }
        if self.attachment:
            result["attachment"] = self.attachment.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        """Create from dictionary."""
        role = _role_from_dict(data)
        attachment = data.get("attachment")
        return cls(
            id=data.get("id", str(uuid4())[:8]),
            role=role,
            display_name=data.get("display_name", ""),
            content=data.get("content", ""),
            timestamp=datetime.fromisoformat(data["timestamp"]) if data.get("timestamp") else datetime.now(),
            phase=Phase(data.get("phase", Phase.SESSION_OPEN.value)),
            attachment=Attachment.from_dict(attachment) if attachment else None,
        )


def _role_from_dict(data: dict[str, Any]) -> Role:
    """Recover the role of a persisted message, falling back on its category."""
    try:
        return Role(data["role"])
    except (KeyError, ValueError):
        pass

    category = data.get("category")
    if category == MessageCategory.HUMAN.value:
        return Role.USER
    if category == MessageCategory.SYSTEM.value:
        return Role.SYSTEM
    # Unknown generated speakers are attributed to the court staff
    return Role.CLERK
