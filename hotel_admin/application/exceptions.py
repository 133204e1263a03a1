class BookingStoreError(RuntimeError):
    """Raised when the booking store fails (timeouts, network errors, rejected requests). Retriable."""
    pass


class DataFetchError(RuntimeError):
    """Raised when bookings or settings could not be read for a render."""
    pass


class MalformedBookingError(ValueError):
    """Raised when a booking record has missing or unparseable dates."""
    pass


class InvalidDropError(ValueError):
    """Raised when a drop target cannot receive the dragged booking."""
    pass


class WriteFailureError(RuntimeError):
    """Raised when the store rejected a reassignment write."""
    pass


class RenderError(RuntimeError):
    """Raised when the tape chart grid could not be built."""
    pass
