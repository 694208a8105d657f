"""Error taxonomy shared by routes and the store adapter.

Every subclass carries the HTTP status and the public message that ends up
in the ``{"error": ...}`` body. Internal diagnostics are logged where they
occur and never stored on the exception message.
"""


class WordrankError(Exception):
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthorizationFailure(WordrankError):
    status_code = 403
    default_message = 'Forbidden'


class NotFound(WordrankError):
    status_code = 404
    default_message = 'Not found'


class ValidationFailure(WordrankError):
    status_code = 400
    default_message = 'Invalid request'


class Conflict(WordrankError):
    status_code = 409
    default_message = 'Conflict'


class DataUnavailable(WordrankError):
    status_code = 500
    default_message = 'Data temporarily unavailable'
