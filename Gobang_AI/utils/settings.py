"""Engine/session configuration loaded from YAML and overridden from the CLI."""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Optional

import yaml

try:
    from ai import heuristic
    from ai.transposition import DEFAULT_MAX_ENTRIES, REPLACE_POLICIES
except ImportError:
    from Gobang_AI.ai import heuristic
    from Gobang_AI.ai.transposition import DEFAULT_MAX_ENTRIES, REPLACE_POLICIES


PROJECT_DIR = Path(__file__).resolve().parents[1]
SEARCH_BACKENDS = ("alphabeta", "minimax", "mcts")


def resolve_project_path(path) -> Path:
    """Resolve a repo-relative path when invoked from outside `Gobang_AI/`."""
    p = Path(path)
    if p.is_absolute() or p.exists():
        return p
    candidate = PROJECT_DIR / p
    return candidate if candidate.exists() else p


def load_settings(path="config/settings.yaml"):
    path = resolve_project_path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    return data


@dataclass(frozen=True)
class EngineConfig:
    board_size: int = 15
    time_budget: float = 1.0  # soft, seconds per AI move
    hard_timeout: float = 5.0  # watchdog, seconds
    max_depth: int = 4
    candidate_limit: int = 20
    neighbor_radius: int = 1  # tactical scan
    search_radius: int = 1  # search candidates
    allow_overline: bool = True
    use_tt: bool = True
    tt_replace: str = "always"
    tt_max_entries: int = DEFAULT_MAX_ENTRIES
    enable_vct: bool = False
    vct_depth: int = 4
    search_backend: str = "alphabeta"
    seed: Optional[int] = None
    rollout_limit: int = 256
    explore: float = 1.4
    playout_depth: int = 20
    weights: heuristic.ScoreTable = field(default_factory=lambda: heuristic.DEFAULT_WEIGHTS)

    def __post_init__(self):
        if self.board_size < 5:
            raise ValueError("board_size must be at least 5")
        if self.time_budget is not None and self.time_budget <= 0:
            raise ValueError("time_budget must be positive (or None for fixed-depth search)")
        if self.hard_timeout <= 0:
            raise ValueError("hard_timeout must be positive")
        if self.time_budget is not None and self.hard_timeout < self.time_budget:
            raise ValueError("hard_timeout must not be shorter than time_budget")
        for name in ("max_depth", "candidate_limit", "neighbor_radius", "search_radius", "vct_depth",
                     "rollout_limit", "playout_depth", "tt_max_entries"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.tt_replace not in REPLACE_POLICIES:
            raise ValueError(f"tt_replace must be one of {REPLACE_POLICIES}")
        if self.search_backend not in SEARCH_BACKENDS:
            raise ValueError(f"search_backend must be one of {SEARCH_BACKENDS}")

    @classmethod
    def from_settings(cls, settings, weights=None, **overrides):
        """Build from a settings mapping; None-valued overrides are ignored."""
        known = {f.name for f in fields(cls)} - {"weights"}
        unknown = set(settings) - known - {"weights_file"}
        if unknown:
            raise ValueError(f"Unknown settings keys: {sorted(unknown)}")
        values = {k: v for k, v in settings.items() if k in known}
        values.update({k: v for k, v in overrides.items() if v is not None})
        if weights is None:
            weights = heuristic.load_weights(settings.get("weights_file", "config/weights.yaml"))
        return cls(weights=weights, **values)

    def with_overrides(self, **overrides):
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
