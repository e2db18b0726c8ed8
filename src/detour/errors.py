"""Errors raised while planning a route.

Every error carries the message shown to the user. They are resolved into a
single outcome at the planning service boundary.
"""


class RoutePlanningError(Exception):
    """Base class for failures that abort a planning request."""

    default_message = "Route planning failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class MissingAddressError(RoutePlanningError):
    default_message = "Please fill in the start and end points."


class AddressNotFoundError(RoutePlanningError):
    default_message = "Could not find the start or destination. Please be more specific."


class RouteNotFoundError(RoutePlanningError):
    default_message = (
        "Could not find a route. The locations might be unreachable by car or the detour is too complex."
    )


class SessionBusyError(RoutePlanningError):
    default_message = "A route is already being planned for this session."
