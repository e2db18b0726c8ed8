"""Detour router: plan driving routes that steer around no-go zones."""

__version__ = "0.1.0"
