"""
Post-approval hook registry.

Hooks run after a booking's status has been set to approved. Each hook is
isolated: an exception is logged and counted, and the remaining hooks still
run. A hook can never fail the approval itself.

Built-in hooks are registered disabled. Automatic staff assignment and
calendar event creation are handled by a background service that watches the
primary bookings collection; enabling a built-in hook through the
POST_APPROVAL_HOOKS setting hands the booking to that service explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

import structlog

from villa_bookings.config import POST_APPROVAL_HOOKS
from villa_bookings.metrics import post_approval_hook_runs

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ApprovalContext:
    """Everything a hook may need about the decision that was just applied."""

    booking_id: str
    action: str
    new_status: str
    admin_id: str
    collection: str
    booking: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class HookOutcome:
    name: str
    success: bool
    error: str | None = None


PostApprovalHook = Callable[[ApprovalContext], None]


@dataclass
class _RegisteredHook:
    name: str
    hook: PostApprovalHook
    enabled: bool


class HookRegistry:
    """
    Ordered collection of named post-approval hooks.

    Example:
        >>> registry = HookRegistry()
        >>> registry.register("notify_owner", notify_owner)
        >>> outcomes = registry.run(context)
    """

    def __init__(self) -> None:
        self._hooks: dict[str, _RegisteredHook] = {}

    def register(self, name: str, hook: PostApprovalHook, enabled: bool = True) -> None:
        """
        Register a hook under a unique name. Re-registering replaces the hook
        in place, keeping its position.
        """
        self._hooks[name] = _RegisteredHook(name=name, hook=hook, enabled=enabled)

    def unregister(self, name: str) -> None:
        self._hooks.pop(name, None)

    def enable(self, name: str) -> None:
        """
        Raises:
            KeyError: If no hook is registered under name
        """
        self._hooks[name].enabled = True

    def disable(self, name: str) -> None:
        self._hooks[name].enabled = False

    def enabled_hooks(self) -> list[str]:
        return [name for name, entry in self._hooks.items() if entry.enabled]

    def run(self, context: ApprovalContext) -> list[HookOutcome]:
        """
        Run every enabled hook in registration order.

        Args:
            context: The applied approval decision

        Returns:
            list[HookOutcome]: One outcome per enabled hook
        """
        outcomes: list[HookOutcome] = []
        for entry in list(self._hooks.values()):
            if not entry.enabled:
                continue
            try:
                entry.hook(context)
            except Exception as e:
                logger.exception(
                    "post_approval_hook_failed",
                    hook=entry.name,
                    booking_id=context.booking_id,
                    error=str(e),
                )
                post_approval_hook_runs.labels(hook=entry.name, status="failure").inc()
                outcomes.append(HookOutcome(name=entry.name, success=False, error=str(e)))
                continue

            post_approval_hook_runs.labels(hook=entry.name, status="success").inc()
            outcomes.append(HookOutcome(name=entry.name, success=True))
        return outcomes


def request_staff_assignment(context: ApprovalContext) -> None:
    """Hand an approved booking to the automatic staff-assignment service."""
    logger.info(
        "staff_assignment_requested",
        booking_id=context.booking_id,
        property_id=context.booking.get("property_id"),
        check_in_date=context.booking.get("check_in_date"),
        check_out_date=context.booking.get("check_out_date"),
    )


def request_calendar_event(context: ApprovalContext) -> None:
    """Hand an approved booking to the calendar integration service."""
    logger.info(
        "calendar_event_requested",
        booking_id=context.booking_id,
        collection=context.collection,
        check_in_date=context.booking.get("check_in_date"),
        check_out_date=context.booking.get("check_out_date"),
    )


def build_default_registry(enabled: list[str] | None = None) -> HookRegistry:
    """
    Build the registry with the built-in hooks, enabling the named ones.

    Args:
        enabled: Hook names to enable (defaults to POST_APPROVAL_HOOKS)

    Returns:
        HookRegistry: Registry with built-in hooks registered
    """
    enabled = POST_APPROVAL_HOOKS if enabled is None else enabled

    registry = HookRegistry()
    registry.register("automatic_staff_assignment", request_staff_assignment, enabled=False)
    registry.register("calendar_event_creation", request_calendar_event, enabled=False)

    for name in enabled:
        try:
            registry.enable(name)
        except KeyError:
            logger.warning("unknown_post_approval_hook", hook=name)
    return registry


post_approval_hooks = build_default_registry()
