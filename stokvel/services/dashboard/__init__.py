"""Dashboard services

Reload orchestration, the headless dashboard controller and the pure
aggregates the views are built from.
"""

from .loader import RELOAD_FAILED_MESSAGE, DataLoader
from .service import DashboardService, DashboardState

__all__ = [
    'DataLoader',
    'DashboardService',
    'DashboardState',
    'RELOAD_FAILED_MESSAGE',
]
