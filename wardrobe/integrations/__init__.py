"""Integration check helpers."""

from .checks import IntegrationCheckResult, check_storage, check_styling_service, run_all_checks

__all__ = [
    "IntegrationCheckResult",
    "check_storage",
    "check_styling_service",
    "run_all_checks",
]
