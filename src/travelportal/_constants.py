"""Internal constants shared across the library."""

#: Storage key holding the serialized session principal.
SESSION_STORAGE_KEY = "currentUser"

#: Login failure message. Never distinguishes unknown email from wrong password.
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"

DEFAULT_PAYMENT_METHOD = "Credit Card"

# ------------------------------------------------------------------
# Booking cancellation window
# ------------------------------------------------------------------

#: A booking may be cancelled only while its start date is more than
#: this many days away.
DEFAULT_CANCELLATION_NOTICE_DAYS = 7
