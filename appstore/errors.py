"""Exceptions raised by the App store and codec.  Each carries the HTTP status
the service answers with and a plain-text message used as the response body.
"""


class AppStoreError(Exception):
    """Base class of all errors which terminate a request."""

    status = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class DecodeError(AppStoreError):
    """The request body could not be decoded."""

    status = 500


class ValidationError(AppStoreError):
    """A required request field is absent."""

    status = 400

    def __init__(self, field):
        super().__init__(f"{field} must be specified.")
        self.field = field


class NotFoundError(AppStoreError):
    """No App is stored under the requested id."""

    status = 404

    def __init__(self, app_id=None):
        super().__init__("App could not be found.")
        self.app_id = app_id


class UnsupportedMediaTypeError(AppStoreError):
    """The request Content-Type is neither JSON nor XML."""

    status = 415


class NotAcceptableError(AppStoreError):
    """The Accept header allows neither JSON nor XML."""

    status = 406
