"""Configuration settings for Moot Court."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class OllamaConfig:
    """Configuration for the Ollama text-generation service."""

    base_url: str = "http://localhost:11434"
    model: str = "qwen2.5:7b"
    timeout: int = 180  # Seconds - long drafts on CPU are slow
    max_retries: int = 3  # Rate-limited requests only
    retry_backoff: float = 4.0
    max_tokens: int = 2048


@dataclass
class SessionConfig:
    """Configuration for the turn-taking loop."""

    turn_ceiling: int = 15
    evidentiary_turn_ceiling: int = 10
    ruling_marker: str = "حكمت"
    turn_temperature: float = 0.5
    max_auto_turns: int = 50


@dataclass
class DecisionConfig:
    """Configuration for the decision engine."""

    temperature: float = 0.0  # Reproducibility
    judge_excerpts: int = 15
    counsel_excerpts: int = 20
    excerpt_chars: int = 320


@dataclass
class DraftingConfig:
    """Configuration for judgment drafting."""

    temperature: float = 0.7
    repair_temperature: float = 0.5
    detail_level: str = "متوسط"
    judge_name: str = "معاذ علي العريشي"
    clerk_name: str = "حاوي عبد الله كيلاني"
    court_city: str = "بجازان"
    circuit_name: str = "(الأولى)"


@dataclass
class Settings:
    """Main settings container."""

    ollama: OllamaConfig = field(default_factory=OllamaConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    decision: DecisionConfig = field(default_factory=DecisionConfig)
    drafting: DraftingConfig = field(default_factory=DraftingConfig)

    # Paths
    sessions_dir: Path = field(default_factory=lambda: Path.home() / ".moot_court" / "sessions")

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        settings = cls()

        if url := os.getenv("OLLAMA_BASE_URL"):
            settings.ollama.base_url = url

        if model := os.getenv("OLLAMA_MODEL"):
            settings.ollama.model = model

        if ceiling := os.getenv("MOOT_COURT_TURN_CEILING"):
            settings.session.turn_ceiling = int(ceiling)

        if ceiling := os.getenv("MOOT_COURT_EVIDENTIARY_CEILING"):
            settings.session.evidentiary_turn_ceiling = int(ceiling)

        if sessions_dir := os.getenv("MOOT_COURT_SESSIONS_DIR"):
            settings.sessions_dir = Path(sessions_dir)

        if log_level := os.getenv("LOG_LEVEL"):
            settings.log_level = log_level

        if log_file := os.getenv("MOOT_COURT_LOG_FILE"):
            settings.log_file = Path(log_file)

        return settings


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def configure(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings
