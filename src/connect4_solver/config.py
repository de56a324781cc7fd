"""
Configuration for the Connect Four solver.
"""

from dataclasses import dataclass, fields, replace
from typing import Optional


# Solver Configuration
SOLVER_CONFIG = {
    'tt_log2_size': 20,                 # 2**20 transposition table slots
    'weak': False,                      # True: only win/draw/loss, no move counts
    'opening_book': '7x6.book',         # Accepted on the command line, never loaded
    'seed': None,                       # Tie-break RNG seed (None = fresh entropy)
}

# Logging Configuration
LOGGING_CONFIG = {
    'level': 'WARNING',
    'format': '%(message)s',
    'datefmt': '[%X]',
}


@dataclass(frozen=True)
class SolverConfig:
    """Resolved solver settings (defaults from SOLVER_CONFIG, overridden by CLI flags)."""
    tt_log2_size: int = 20
    weak: bool = False
    opening_book: str = '7x6.book'
    seed: Optional[int] = None

    @classmethod
    def from_dict(cls, values: dict) -> 'SolverConfig':
        """Build a config from a dict, ignoring keys that are not settings."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})

    def with_overrides(self, **overrides) -> 'SolverConfig':
        """Return a copy with every override that is not None applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def get_solver_config() -> SolverConfig:
    return SolverConfig.from_dict(SOLVER_CONFIG)
