class UnauthorizedError(Exception):
    pass

class NotFoundError(Exception):
    pass

class AlreadyRegisteredError(Exception):
    def __init__(self, message="User is already registered for this event"):
        super().__init__(message)

class SerialActivationError(Exception):
    def __init__(self, message="Invalid or already active serial number."):
        super().__init__(message)

class ConflictError(Exception):
    def __init__(self, message="The event was modified by another request. Please retry."):
        super().__init__(message)
