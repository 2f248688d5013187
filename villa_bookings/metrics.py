"""
Prometheus metrics for property resolution and booking workflows.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from villa_bookings.metrics import property_matches
    >>> property_matches.labels(method="pmsListingId", confidence="high").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Property Resolver Metrics
# =============================================================================

property_matches = Counter(
    "villa_property_matches_total",
    "Total property resolution attempts by outcome",
    ["method", "confidence"],
)
"""
Counter for property resolution attempts.

Labels:
    method: Identifier that resolved the match (pmsListingId, ..., none)
    confidence: high, medium or low
"""

property_lookup_errors = Counter(
    "villa_property_lookup_errors_total",
    "Store errors raised by a single resolver priority level",
    ["method"],
)

# =============================================================================
# Booking Approval Metrics
# =============================================================================

booking_approvals = Counter(
    "villa_booking_approvals_total",
    "Total approve/reject requests by outcome",
    ["action", "outcome"],
)
"""
Counter for booking approval requests.

Labels:
    action: approve, reject or invalid
    outcome: success, invalid, not_found, conflict, error
"""

approval_duration = Histogram(
    "villa_booking_approval_duration_seconds",
    "Duration of approve/reject requests in seconds",
    ["action"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, float("inf")),
)

propagation_updates = Counter(
    "villa_booking_propagation_total",
    "Best-effort status propagation to duplicate collections",
    ["collection", "status"],
)
"""
Counter for secondary-collection propagation.

Labels:
    collection: pending_bookings, bookings, live_bookings
    status: success, skipped or failure
"""

side_effect_failures = Counter(
    "villa_side_effect_failures_total",
    "Failed audit or sync-event writes after a successful status change",
    ["kind"],
)

post_approval_hook_runs = Counter(
    "villa_post_approval_hook_runs_total",
    "Post-approval hook executions",
    ["hook", "status"],
)

# =============================================================================
# Intake Metrics
# =============================================================================

bookings_received = Counter(
    "villa_bookings_received_total",
    "Bookings received from PMS/OTA feeds by outcome",
    ["outcome"],
)
"""
Counter for booking intake.

Labels:
    outcome: created, duplicate, invalid, error
"""
