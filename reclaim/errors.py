class LifecycleError(Exception):
    """Base class for errors raised by the item and claim lifecycle."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(LifecycleError):
    pass


class InvalidState(LifecycleError):
    pass


class ExternalServiceFailure(Exception):
    """An identity or profile provider call failed.

    `message` is the provider's own text, passed through uninterpreted.
    """

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class EmailInUse(ExternalServiceFailure):
    pass


class WeakPassword(ExternalServiceFailure):
    pass


class InvalidCredentials(ExternalServiceFailure):
    pass
