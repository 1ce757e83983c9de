class AppError(Exception):
    """Base class for application errors."""


class GenerationError(AppError):
    """The generation service failed or returned unusable output."""


class StorageError(AppError):
    """The document store could not be read or written."""


class NotFoundError(AppError):
    """The requested profile or medicine does not exist."""


class NotificationError(AppError):
    """The e-mail provider rejected or failed to send a message."""
