"""
Environment-backed configuration for nexusbot
"""

from .config import (
    BranchingPolicy,
    Config,
    DatabaseFailurePolicy,
    Environment,
    ValidationFailurePolicy,
    load_config,
)

__all__ = [
    "BranchingPolicy",
    "Config",
    "DatabaseFailurePolicy",
    "Environment",
    "ValidationFailurePolicy",
    "load_config",
]
