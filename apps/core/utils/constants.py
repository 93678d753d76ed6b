"""
Application-wide constants
"""

# User roles
USER_ROLE_ADMIN = 'admin'
USER_ROLE_PROVIDER = 'provider'
USER_ROLE_CUSTOMER = 'customer'

USER_ROLES = [
    (USER_ROLE_ADMIN, 'Admin'),
    (USER_ROLE_PROVIDER, 'Provider'),
    (USER_ROLE_CUSTOMER, 'Customer'),
]

# Appointment statuses
APPOINTMENT_STATUS_PENDING = 'pending'
APPOINTMENT_STATUS_CONFIRMED = 'confirmed'
APPOINTMENT_STATUS_COMPLETED = 'completed'
APPOINTMENT_STATUS_CANCELLED = 'cancelled'
APPOINTMENT_STATUS_REFUND_PENDING = 'refund_pending'
APPOINTMENT_STATUS_REFUNDED = 'refunded'

APPOINTMENT_STATUSES = [
    (APPOINTMENT_STATUS_PENDING, 'Pending'),
    (APPOINTMENT_STATUS_CONFIRMED, 'Confirmed'),
    (APPOINTMENT_STATUS_COMPLETED, 'Completed'),
    (APPOINTMENT_STATUS_CANCELLED, 'Cancelled'),
    (APPOINTMENT_STATUS_REFUND_PENDING, 'Refund Pending'),
    (APPOINTMENT_STATUS_REFUNDED, 'Refunded'),
]

# Statuses whose interval occupies part of a slot
OCCUPYING_APPOINTMENT_STATUSES = (
    APPOINTMENT_STATUS_PENDING,
    APPOINTMENT_STATUS_CONFIRMED,
    APPOINTMENT_STATUS_COMPLETED,
)

# Statuses that still need action; they block slot deletion and can be cancelled
ACTIVE_APPOINTMENT_STATUSES = (
    APPOINTMENT_STATUS_PENDING,
    APPOINTMENT_STATUS_CONFIRMED,
)

# Invoice statuses
INVOICE_STATUS_SUCCESS = 'success'
INVOICE_STATUS_REFUND_PENDING = 'refund_pending'
INVOICE_STATUS_REFUNDED = 'refunded'

INVOICE_STATUSES = [
    (INVOICE_STATUS_SUCCESS, 'Success'),
    (INVOICE_STATUS_REFUND_PENDING, 'Refund Pending'),
    (INVOICE_STATUS_REFUNDED, 'Refunded'),
]

# Booking packages
APPOINTMENT_DURATIONS = [
    (60, '60 minutes'),
    (120, '120 minutes'),
]
ALLOWED_DURATION_MINUTES = tuple(minutes for minutes, _ in APPOINTMENT_DURATIONS)

MIN_NOTE_LENGTH = 10
MIN_CANCEL_REASON_LENGTH = 10
MAX_CANCEL_REASON_LENGTH = 500

# Customers may cancel up to 24 hours before the session starts
CUSTOMER_CANCEL_WINDOW_MINUTES = 1440

# Slot listing modes
SLOT_LIST_UPCOMING = 'upcoming'
SLOT_LIST_HISTORY = 'history'

SLOT_LIST_MODES = [
    (SLOT_LIST_UPCOMING, 'Upcoming'),
    (SLOT_LIST_HISTORY, 'History'),
]

# Provider decisions on a pending request
DECISION_APPROVE = 'approve'
DECISION_REJECT = 'reject'

DECISIONS = [
    (DECISION_APPROVE, 'Approve'),
    (DECISION_REJECT, 'Reject'),
]

# Router lookups only match UUID primary keys
UUID_LOOKUP_REGEX = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'
