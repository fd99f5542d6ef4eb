"""Event name constants.

Learn: Centralizing event names prevents typos between the backend that
broadcasts them and the dashboard/landing clients that listen for them.
"""

# ─── Stream protocol ────────────────────────────────────

CONNECTED = "connected"
PING = "ping"

# ─── Service catalogue (public + dashboard) ─────────────

SERVICE_CREATED = "service:created"
SERVICE_UPDATED = "service:updated"
SERVICE_DELETED = "service:deleted"
STATS_INVALIDATE = "stats:invalidate"

# ─── Bookings ───────────────────────────────────────────

BOOKING_CREATED = "booking:created"
BOOKING_UPDATED = "booking:updated"
BOOKING_DELETED = "booking:deleted"
BOOKING_STATUS = "booking:status"
BOOKING_ASSIGNMENT_SENT = "booking:assignment:sent"
BOOKING_ASSIGNMENT_ACCEPTED = "booking:assignment:accepted"
BOOKING_ASSIGNMENT_EXPIRED = "booking:assignment:expired"
BOOKING_ASSIGNMENT_CANCELLED = "booking:assignment:cancelled"

# ─── Payments + commissions ─────────────────────────────

PAYMENT_CREATED = "payment:created"
PAYMENTS_INVALIDATE = "payments:invalidate"
COMMISSION_CREATED = "commission:created"

# ─── Inventory ──────────────────────────────────────────

PRODUCT_CREATED = "product:created"
PRODUCT_UPDATED = "product:updated"
PRODUCT_DELETED = "product:deleted"
