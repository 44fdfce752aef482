from fastapi import status


class AppError(Exception):
    """Base class for errors that are translated into an HTTP response."""
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidArgumentError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidStateError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotReceiverError(ForbiddenError):
    """Someone other than the receiver answered a friend request."""
    status_code = status.HTTP_400_BAD_REQUEST
