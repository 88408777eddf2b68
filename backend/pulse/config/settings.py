"""
Configuration settings for the pulse engine.
Loads environment variables and provides application settings.
"""
from pathlib import Path
from pydantic_settings import BaseSettings
from typing import List

# settings.py is at backend/pulse/config/settings.py → 4 levels up
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - use absolute path to avoid working directory issues
    database_url: str = f"sqlite:///{_PROJECT_ROOT}/data/pulse.db"

    # Canonical concept matching
    tag_match_threshold: float = 0.90  # Minimum cosine similarity to reuse a canonical tag
    theme_match_threshold: float = 0.90  # Minimum cosine similarity to reuse a canonical theme
    match_min_margin: float = 0.0  # Required gap between best and runner-up similarity

    # Signal-type allow-list cache
    signal_type_cache_ttl_seconds: int = 7200  # 2 hours

    # Baseline windows (days)
    baseline_review_window_days: int = 30
    baseline_theme_windows: str = "14,90"  # comma-separated, shortest first
    baseline_channel_window_days: int = 30
    baseline_negative_window_days: int = 30

    # Pulse point assembly
    pulse_title_max_chars: int = 140

    @property
    def baseline_theme_windows_list(self) -> List[int]:
        """Parse comma-separated theme windows to a sorted list of ints."""
        windows = {int(w.strip()) for w in self.baseline_theme_windows.split(",") if w.strip()}
        return sorted(windows)

    def match_threshold_for(self, kind: str) -> float:
        """Return the acceptance threshold for a concept kind ("tag" or "theme")."""
        if kind == "tag":
            return self.tag_match_threshold
        return self.theme_match_threshold

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
