"""
Domain exceptions raised by the service layer.

Routers never catch these; ``ducki.main`` registers one handler for
``DuckiError`` that answers with the class's ``status_code`` and message.
"""


class DuckiError(Exception):
    """Base class for service-layer failures"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MediaUploadError(DuckiError):
    """The media host did not return a usable URL"""

    status_code = 502

    def __init__(self, message: str = "Image upload failed"):
        super().__init__(message)


class RecordStoreError(DuckiError):
    """A database write or read failed; message is the raw driver error"""

    status_code = 400


class AccessDeniedError(DuckiError):
    """A write tried to touch a row owned by another user"""

    status_code = 403

    def __init__(self, message: str = "You do not have access to this resource"):
        super().__init__(message)


class AuthError(DuckiError):
    """Sign-up, sign-in or password change rejected"""

    status_code = 400
