from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidTransitionError(HTTPException):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, entity: str, current: str, requested: str):
        self.entity = entity
        self.current = current
        self.requested = requested
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot change {entity} status from {current} to {requested}",
        )


class ConcurrentUpdateError(HTTPException):
    def __init__(self, detail: str = "Record was modified concurrently. Please retry."):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class EmailDeliveryError(Exception):
    """The mail provider could not accept a message."""
