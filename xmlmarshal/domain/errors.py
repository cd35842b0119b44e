"""Error vocabulary understood by the XML marshaler.

Handlers report failures by returning (or raising) exceptions. Two optional
capabilities change how the marshaler renders them:

- ``NamedError``: the error supplies its own machine-readable name.
- ``HTTPEquivError``: the error maps onto an HTTP status code.

Both are structural, like ``collections.abc`` interfaces: any exception class
defining the method qualifies without inheriting from them. Werkzeug's HTTP
exceptions map onto their ``code`` without implementing either.
"""
from abc import ABC, abstractmethod
from typing import Optional

from werkzeug.exceptions import HTTPException
from werkzeug.http import HTTP_STATUS_CODES


def _has_method(subclass, method_name: str) -> bool:
    for klass in subclass.__mro__:
        if method_name in klass.__dict__:
            return callable(klass.__dict__[method_name])
    return False


class NamedError(ABC):
    """Capability of an error that names itself in error documents."""

    @abstractmethod
    def name(self) -> str:
        """
        Get the machine-readable name of the error.

        Returns:
            Short category name, e.g. ``widget_not_found``
        """
        pass

    @classmethod
    def __subclasshook__(cls, subclass):
        if cls is NamedError:
            return _has_method(subclass, "name")
        return NotImplemented


class HTTPEquivError(ABC):
    """Capability of an error that is equivalent to an HTTP status."""

    @abstractmethod
    def status(self) -> int:
        """
        Get the HTTP status code equivalent to this error.

        Returns:
            HTTP status code
        """
        pass

    @classmethod
    def __subclasshook__(cls, subclass):
        if cls is HTTPEquivError:
            return _has_method(subclass, "status")
        return NotImplemented


class MarshalerError(Exception):
    """Raised for handlers that do not fit the marshaler's contract."""

    def __init__(self, message: str, *args):
        """
        Initialize marshaler error.

        Args:
            message: Message, optionally a ``%`` format string
            *args: Values interpolated into the message
        """
        super().__init__(message % args if args else message)


class DecodeError(MarshalerError):
    """Raised when a request body cannot be decoded into the declared type."""


class EncodeError(MarshalerError):
    """Raised when a value cannot be encoded as an XML document."""


def http_status(err: BaseException) -> Optional[int]:
    """
    Get the HTTP status an error is equivalent to.

    Werkzeug's ``HTTPException`` family (``NotFound``, ``abort(409)``...)
    counts through its ``code``.

    Args:
        err: The error being rendered

    Returns:
        HTTP status code, or None if the error carries none
    """
    if isinstance(err, HTTPEquivError):
        return err.status()
    if isinstance(err, HTTPException):
        return err.code
    return None


def error_description(err: BaseException) -> str:
    """Get the human-readable message of an error."""
    if isinstance(err, HTTPException) and err.description is not None:
        return str(err.description)
    return str(err)


def error_name(err: BaseException, snake_case_http_equiv_errors: bool = False) -> str:
    """
    Derive the category name used in the ``error`` field of error documents.

    Args:
        err: The error being rendered
        snake_case_http_equiv_errors: Name HTTP-equivalent errors after their
            status text

    Returns:
        Category name

    >>> from werkzeug.exceptions import NotFound
    >>> error_name(NotFound("no widget"), snake_case_http_equiv_errors=True)
    'not_found'
    >>> error_name(ValueError("bad"))
    'ValueError'
    """
    if isinstance(err, NamedError):
        return err.name()
    status = http_status(err)
    if status is not None and snake_case_http_equiv_errors:
        return HTTP_STATUS_CODES.get(status, "").lower().replace(" ", "_")
    cls = type(err)
    if cls.__name__[:1] == "_" or cls.__name__[:1].islower():
        return "error"
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"
