"""
Error taxonomy for the admin namespace.

Every error here is recovered at the route/app boundary and turned into a
redirect, a re-rendered form or an error page.
"""


class BackofficeError(Exception):
    """Base class for errors raised by the admin services."""


class InvalidCredentials(BackofficeError):
    """Email or password did not verify. Never says which."""

    def __init__(self, message='Invalid email or password.'):
        super().__init__(message)
        self.message = message


class Unauthenticated(BackofficeError):
    """No live admin session is attached to the request."""


class ValidationFailed(BackofficeError):
    """Input was rejected.

    ``fields`` maps a field name to a list of messages. Messages that do not
    belong to a single field are stored under ``'base'``.
    """

    def __init__(self, fields):
        self.fields = {name: list(messages) for name, messages in fields.items()}
        super().__init__(self.full_messages())

    def full_messages(self):
        messages = []
        for name, errors in self.fields.items():
            for error in errors:
                if name == 'base':
                    messages.append(error)
                else:
                    messages.append(f'{name.replace("_", " ").capitalize()} {error}')
        return '; '.join(messages)


class NotFound(BackofficeError):
    """The requested record does not exist."""


class PersistenceUnavailable(BackofficeError):
    """The database could not be reached or a write failed."""
