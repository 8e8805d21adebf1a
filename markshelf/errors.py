"""Error taxonomy shared by the backend collaborator and the controllers.

Backend errors never reach a view: the bookmark store client and the
controllers convert them into one of the ``FormError`` subclasses, which
carry the message shown to the user.
"""


class MarkshelfError(Exception):
    pass


class FormError(MarkshelfError):
    """An outcome reported back to the add form or an API caller."""

    message = "Something went wrong"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(FormError):
    message = "Invalid input"


class AuthError(FormError):
    message = "User not authenticated"


class ConflictError(FormError):
    message = "Bookmark already exists"


class StoreError(FormError):
    message = "Something went wrong"


class InvalidURL(ValueError):
    pass


class BackendError(MarkshelfError):
    pass


class BackendConflict(BackendError):
    pass


class BackendNotFound(BackendError):
    pass


class NotFoundError(StoreError):
    message = "Bookmark not found"
