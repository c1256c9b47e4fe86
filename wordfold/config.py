"""
Pipeline configuration.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_FOLDS = 5
DEFAULT_TOP_K = 10
DEFAULT_COLLECT_TIMEOUT = 10.0  # seconds per collection attempt

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class PipelineConfig:
    """Settings for one pipeline run."""

    folds: int = DEFAULT_FOLDS
    top_k: int = DEFAULT_TOP_K
    collect_timeout: float = DEFAULT_COLLECT_TIMEOUT
    case_sensitive: bool = False

    def __post_init__(self):
        if self.folds < 1:
            raise ValueError(f"folds must be at least 1, got {self.folds}")
        if self.top_k < 0:
            raise ValueError(f"top_k must be non-negative, got {self.top_k}")
        if self.collect_timeout <= 0:
            raise ValueError(f"collect_timeout must be positive, got {self.collect_timeout}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PipelineConfig":
        """
        Build a config from WORDFOLD_* environment variables.

        Args:
            environ: Mapping to read from, defaults to os.environ

        Returns:
            PipelineConfig with unset variables left at their defaults

        Raises:
            ValueError: If a variable holds an invalid value
        """
        if environ is None:
            environ = os.environ

        return cls(
            folds=int(environ.get('WORDFOLD_FOLDS', DEFAULT_FOLDS)),
            top_k=int(environ.get('WORDFOLD_TOP_K', DEFAULT_TOP_K)),
            collect_timeout=float(environ.get('WORDFOLD_COLLECT_TIMEOUT', DEFAULT_COLLECT_TIMEOUT)),
            case_sensitive=environ.get('WORDFOLD_CASE_SENSITIVE', '').strip().lower() in _TRUE_VALUES,
        )
