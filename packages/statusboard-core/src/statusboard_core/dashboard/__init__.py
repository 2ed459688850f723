"""Terminal rendering of the status board."""

from statusboard_core.dashboard.app import DashboardApp
from statusboard_core.dashboard.keyboard import KeyAction, KeyboardTask, action_for_key
from statusboard_core.dashboard.render import (
    ALL_GROUPS,
    filter_groups,
    format_latency,
    latency_class,
    make_group_panel,
    make_latency_chart,
    render_groups,
)

__all__ = [
    "DashboardApp",
    "KeyAction",
    "KeyboardTask",
    "action_for_key",
    "ALL_GROUPS",
    "filter_groups",
    "format_latency",
    "latency_class",
    "make_group_panel",
    "make_latency_chart",
    "render_groups",
]
