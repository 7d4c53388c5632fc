from cinebook.repositories.booking_ledger import BookingLedger

__all__ = ["BookingLedger"]
