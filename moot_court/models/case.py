"""Case context models."""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml

from ..exceptions import CaseContextError
from .roles import PartyType, Role, UserSide, resolve_opponent_role


class Jurisdiction(str, Enum):
    """Court branch hearing the case."""

    ADMINISTRATIVE = "administrative"
    COMMERCIAL = "commercial"
    CRIMINAL = "criminal"
    LABOR = "labor"
    PERSONAL = "personal"
    GENERAL = "general"


class CaseNature(str, Enum):
    """Nature of the claim."""

    COMPENSATION = "compensation"
    ANNULMENT = "annulment"
    COMPENSATION_AND_CORRECTION = "compensation_and_correction"
    OTHER = "other"


JURISDICTION_LABELS: dict[Jurisdiction, str] = {
    Jurisdiction.ADMINISTRATIVE: "إدارية",
    Jurisdiction.COMMERCIAL: "تجارية",
    Jurisdiction.CRIMINAL: "جزائية",
    Jurisdiction.LABOR: "عمالية",
    Jurisdiction.PERSONAL: "أحوال شخصية",
    Jurisdiction.GENERAL: "حقوقية/عامة",
}


@dataclass(frozen=True)
class Party:
    """A party to the case."""

    name: str
    type: PartyType = PartyType.INDIVIDUAL

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"name": self.name, "type": self.type.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Party":
        """Create from dictionary."""
        return cls(
            name=data.get("name") or "",
            type=PartyType(data.get("type", "individual")),
        )


@dataclass(frozen=True)
class CaseContext:
    """Configuration of a case, fixed before the session starts."""

    court_name: str
    plaintiff: Party
    defendant: Party
    facts: str
    requests: str
    title: str = ""
    jurisdiction: Jurisdiction = Jurisdiction.ADMINISTRATIVE
    case_nature: CaseNature = CaseNature.OTHER
    case_type: str = ""
    user_side: UserSide = UserSide.CLAIMANT
    grounds: Optional[str] = None
    damage_date: Optional[str] = None
    evidence: tuple[str, ...] = field(default_factory=tuple)
    experts_enabled: bool = False

    @property
    def opponent_role(self) -> Role:
        """Concrete role of opposing counsel for this case."""
        return resolve_opponent_role(self.user_side, self.plaintiff.type, self.defendant.type)

    @property
    def case_type_label(self) -> str:
        """Case type label, falling back on the jurisdiction's label."""
        return self.case_type or JURISDICTION_LABELS[self.jurisdiction]

    @property
    def display_title(self) -> str:
        """Title for listings."""
        return self.title or self.court_name

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "court_name": self.court_name,
            "jurisdiction": self.jurisdiction.value,
            "case_nature": self.case_nature.value,
            "case_type": self.case_type,
            "plaintiff": self.plaintiff.to_dict(),
            "defendant": self.defendant.to_dict(),
            "user_side": self.user_side.value,
            "facts": self.facts,
            "requests": self.requests,
            "grounds": self.grounds,
            "damage_date": self.damage_date,
            "evidence": list(self.evidence),
            "experts_enabled": self.experts_enabled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CaseContext":
        """Create from dictionary."""
        try:
            return cls(
                title=data.get("title") or "",
                court_name=data.get("court_name") or "",
                jurisdiction=Jurisdiction(data.get("jurisdiction", "administrative")),
                case_nature=CaseNature(data.get("case_nature", "other")),
                case_type=data.get("case_type") or "",
                plaintiff=Party.from_dict(data.get("plaintiff") or {}),
                defendant=Party.from_dict(data.get("defendant") or {}),
                user_side=UserSide(data.get("user_side", "claimant")),
                facts=data.get("facts") or "",
                requests=data.get("requests") or "",
                grounds=data.get("grounds") or None,
                damage_date=data.get("damage_date") or None,
                evidence=tuple(data.get("evidence") or ()),
                experts_enabled=bool(data.get("experts_enabled", False)),
            )
        except (ValueError, TypeError, AttributeError) as e:
            raise CaseContextError(f"Invalid case data: {e}")

    def save(self, path: Path) -> Path:
        """Save case context to a JSON or YAML file (by extension)."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                yaml.dump(
                    self.to_dict(),
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                )
            else:
                json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

        return path

    @classmethod
    def load(cls, path: Path) -> "CaseContext":
        """Load case context from a JSON or YAML file."""
        path = Path(path)
        if not path.exists():
            raise CaseContextError(f"Case file not found: {path}")

        with open(path, encoding="utf-8") as f:
            try:
                if path.suffix.lower() in (".yaml", ".yml"):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                raise CaseContextError(f"Could not parse case file {path}: {e}")

        if not isinstance(data, dict):
            raise CaseContextError(f"Case file must contain a mapping: {path}")

        return cls.from_dict(data)


def validate_case_context(context: CaseContext) -> list[str]:
    """
    Check a case context for intake problems.

    Args:
        context: Case context to check

    Returns:
        List of problems (empty if the case can be heard)
    """
    problems = []

    if context.case_nature == CaseNature.COMPENSATION and not context.damage_date:
        problems.append("تاريخ الضرر إلزامي في قضايا التعويض")

    if (
        context.jurisdiction == Jurisdiction.COMMERCIAL
        and context.defendant.type == PartyType.GOVERNMENT
    ):
        problems.append("لا يمكن مقاضاة جهة حكومية في المحكمة التجارية (الاختصاص للمحكمة الإدارية)")

    if not context.facts.strip() or not context.requests.strip():
        problems.append("البيانات الأساسية للقضية ناقصة")

    return problems
