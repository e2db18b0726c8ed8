"""Detour planning and route plotting."""

from .planner import detour_candidates, order_avoid_zones, plan_detour
from .service import PlotOutcome, PlotSession, SessionRegistry, plot_route

__all__ = [
    "detour_candidates",
    "order_avoid_zones",
    "plan_detour",
    "PlotOutcome",
    "PlotSession",
    "SessionRegistry",
    "plot_route",
]
