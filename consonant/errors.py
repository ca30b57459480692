class ConsonantError(Exception):
    pass

class MalformedSchemaError(ConsonantError):
    pass

class InvalidTransactionStateError(ConsonantError):
    pass

class TransportError(ConsonantError):
    """Raised by a transport when a request could not be completed. Surfaced to callers unmodified."""
    url:str|None = None
    status_code:int|None = None

    def __init__(self, message:str, url:str|None=None, status_code:int|None=None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code

class ObjectValidationError(ConsonantError):
    issues:list = []

    def __init__(self, message:str, issues:list):
        super().__init__(message)
        self.issues = issues
