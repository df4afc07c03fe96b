"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.check_in.app.query import get_check_in_stats_use_case
from src.service.check_in.driving_adapter.http_controller import check_in_controller


WIRE_MODULES: list[ModuleType] = [
    get_check_in_stats_use_case,
    check_in_controller,
]
