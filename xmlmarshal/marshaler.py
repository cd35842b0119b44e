"""XML marshaler: adapts a typed handler function into an HTTP handler.

The marshaler unmarshals XML request bodies, calls the handler and marshals
its result as XML. It refuses requests whose Accept header excludes
``application/xml``.
"""
import logging
import time
from typing import Any, Callable, Iterable, Optional
from urllib.parse import urlsplit

from flask import request as flask_request
from werkzeug.datastructures import Headers
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers import Request, Response

from xmlmarshal.codec.xml_codec import decode_stream, encode, zero_value
from xmlmarshal.config.settings import MarshalerOptions
from xmlmarshal.context import get_context
from xmlmarshal.domain.descriptor import HandlerDescriptor, describe, UNSET
from xmlmarshal.domain.errors import (
    DecodeError,
    EncodeError,
    MarshalerError,
    error_description,
    error_name,
    http_status,
)
from xmlmarshal.middleware.monitoring import track_decode_failure, track_marshaled_request
from xmlmarshal.utils.media_types import (
    TEXT_MEDIA_TYPE,
    XML_MEDIA_TYPE,
    accepts_xml,
    is_xml_content_type,
)

ERROR_TAG = "error"

logger = logging.getLogger(__name__)


def error_document(err: BaseException, snake_case_http_equiv_errors: bool = False) -> bytes:
    """
    Encode the uniform error document for an error.

    Args:
        err: The error to describe
        snake_case_http_equiv_errors: Naming policy for HTTP-equivalent errors

    Returns:
        ``<error><error>name</error><description>message</description></error>``
    """
    return encode(
        {
            "error": error_name(err, snake_case_http_equiv_errors),
            "description": error_description(err),
        },
        root=ERROR_TAG,
    )


class XMLMarshaler:
    """
    HTTP handler that calls a typed function with decoded XML input.

    The function's signature must be::

        (URL, Headers, Request[, Context]) -> Tuple[int, Optional[Headers], Response, Optional[Exception]]

    where Request and Response may be any types the XML codec can bind.
    """

    def __init__(
        self,
        handler: Callable,
        request_type: Any = UNSET,
        response_type: Any = UNSET,
        options: Optional[MarshalerOptions] = None,
    ):
        """
        Validate the handler and build the marshaler.

        Args:
            handler: Handler function
            request_type: Explicit request type, instead of the annotation
            response_type: Explicit response type, instead of the annotation
            options: Marshaler options, defaults to the environment's configuration

        Raises:
            MarshalerError: If the handler does not fit the contract
        """
        self.descriptor: HandlerDescriptor = describe(handler, request_type, response_type)
        self.options = options or MarshalerOptions.from_config()
        self.name = getattr(handler, "__qualname__", repr(handler))

    def __call__(self, request: Request) -> Response:
        return self.serve(request)

    def serve(self, request: Request) -> Response:
        """
        Serve one request.

        Args:
            request: Incoming request

        Returns:
            Outgoing response
        """
        start_time = time.time()
        response = self._serve(request)
        if self.options.enable_metrics:
            track_marshaled_request(request.method, response.status_code, time.time() - start_time)
        return response

    def wsgi_app(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        """WSGI entry point serving every request through this marshaler."""
        response = self.serve(Request(environ))
        return response(environ, start_response)

    def as_view(self, name: Optional[str] = None) -> Callable:
        """
        Build a Flask view function serving the current request.

        Args:
            name: Endpoint name, defaults to the handler's name

        Returns:
            View function for ``add_url_rule``
        """
        def view(**kwargs):
            return self.serve(flask_request)

        view.__name__ = name or self.descriptor.function.__name__
        return view

    def _serve(self, request: Request) -> Response:
        response = Response()
        accept = request.headers.get("Accept", "")
        if not accepts_xml(accept):
            response.headers["Content-Type"] = TEXT_MEDIA_TYPE
            response.status_code = 406
            response.set_data(f'"{accept}" does not contain "{XML_MEDIA_TYPE}"')
            return response
        response.headers["Content-Type"] = XML_MEDIA_TYPE

        descriptor = self.descriptor
        if request.method in self.options.body_methods:
            if descriptor.unconstrained_request:
                return self._write_error(response, 500, MarshalerError(
                    "unconstrained request type is not suitable for %s request bodies",
                    request.method,
                ))
            content_type = request.headers.get("Content-Type", "")
            if not is_xml_content_type(content_type):
                self._track_decode_failure("content_type")
                return self._write_error(response, 415, MarshalerError(
                    "Content-Type header is %s, not %s",
                    content_type,
                    XML_MEDIA_TYPE,
                ))
            try:
                rq = decode_stream(request.stream, descriptor.request_type)
            except DecodeError as e:
                logger.info(f"Rejected {request.method} {request.path} body for {self.name}: {e}")
                self._track_decode_failure("malformed")
                return self._write_error(response, 400, e)
            request.stream.close()
        else:
            # A concrete type on a read method is unusual but allowed; the body stays unread
            if not descriptor.unconstrained_request:
                logger.debug(
                    f"{request.method} request to {self.name} has a concrete request type; "
                    "any body is ignored"
                )
            rq = zero_value(descriptor.request_type)

        args = [urlsplit(request.url), request.headers, rq]
        if descriptor.accepts_context:
            args.append(get_context(request))

        try:
            result = descriptor.function(*args)
        except HTTPException as e:
            logger.info(f"Handler {self.name} aborted with {e.code}")
            result = (500, None, None, e)
        except Exception as e:
            logger.error(f"Handler {self.name} raised: {e}", exc_info=True)
            result = (500, None, None, e)

        if not isinstance(result, tuple) or len(result) != 4 or not isinstance(result[0], int):
            logger.error(f"Handler {self.name} returned {result!r}, not (int, Headers, response, error)")
            return self._write_error(response, 500, MarshalerError(
                "handler returned %s, not a 4-tuple starting with an int status",
                type(result).__name__,
            ))
        status, headers, rs, err = result

        if err is not None:
            equivalent = http_status(err)
            if equivalent is not None:
                status = equivalent
            elif status < 400:
                status = 500
            return self._write_error(response, status, err)

        if headers:
            if not isinstance(headers, Headers):
                headers = Headers(headers)
            for key in dict.fromkeys(headers.keys()):
                response.headers.setlist(key, headers.getlist(key))
        response.status_code = status
        if rs is not None and status != 204:
            try:
                response.set_data(encode(rs))
            except EncodeError as e:
                logger.error(f"Failed to encode response of {self.name}: {e}")
        return response

    def _write_error(self, response: Response, status: int, err: BaseException) -> Response:
        response.status_code = status
        try:
            response.set_data(error_document(err, self.options.snake_case_http_equiv_errors))
        except EncodeError as e:
            logger.error(f"Failed to encode error document: {e}")
        return response

    def _track_decode_failure(self, reason: str) -> None:
        if self.options.enable_metrics:
            track_decode_failure(reason)


def marshaled(
    handler: Callable,
    request_type: Any = UNSET,
    response_type: Any = UNSET,
    options: Optional[MarshalerOptions] = None,
) -> XMLMarshaler:
    """
    Wrap a handler function in an XMLMarshaler.

    Args:
        handler: Handler function
        request_type: Explicit request type, instead of the annotation
        response_type: Explicit response type, instead of the annotation
        options: Marshaler options

    Returns:
        XMLMarshaler serving the handler

    Raises:
        MarshalerError: If the handler does not fit the contract
    """
    return XMLMarshaler(handler, request_type, response_type, options)
