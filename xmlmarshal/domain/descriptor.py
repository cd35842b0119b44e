"""Handler descriptors: the validated shape of a marshaled handler.

A marshaled handler must look like::

    def handler(url: URL, headers: Headers, rq: Widget) -> Tuple[int, Optional[Headers], Widget, Optional[Exception]]:
        ...

optionally followed by a fourth parameter receiving the request context.
"""
import inspect
from dataclasses import dataclass
from typing import Any, Callable, Tuple, get_args, get_origin, get_type_hints
from urllib.parse import SplitResult

from werkzeug.datastructures import Headers

from xmlmarshal.codec.xml_codec import is_bindable, unwrap_optional
from xmlmarshal.domain.errors import MarshalerError

URL = SplitResult

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
UNSET = object()


@dataclass(frozen=True)
class HandlerDescriptor:
    """Immutable record of a handler's declared input and output shapes."""

    function: Callable
    request_type: Any
    response_type: Any
    arity: int

    @property
    def accepts_context(self) -> bool:
        """Whether the handler takes the request context as a fourth argument."""
        return self.arity == 4

    @property
    def unconstrained_request(self) -> bool:
        """Whether the handler declares no concrete request type."""
        return self.request_type is Any


def _type_name(tp: Any) -> str:
    if tp is UNSET:
        return "unannotated"
    if isinstance(tp, type):
        if tp.__module__ == "builtins":
            return tp.__qualname__
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp)


def _is_exception_type(tp: Any) -> bool:
    tp, _ = unwrap_optional(tp)
    return isinstance(tp, type) and issubclass(tp, BaseException)


def _check_return(hints: dict) -> Tuple[Any, ...]:
    ret = hints.get("return", UNSET)
    args = get_args(ret) if get_origin(ret) is tuple else ()
    if len(args) != 4 or Ellipsis in args:
        raise MarshalerError("output arity was %s, not 4", len(args) if args else _type_name(ret))
    if args[0] is not int:
        raise MarshalerError("type of first return value was %s, not int", _type_name(args[0]))
    if unwrap_optional(args[1])[0] is not Headers:
        raise MarshalerError(
            "type of second return value was %s, not werkzeug.datastructures.Headers",
            _type_name(args[1]),
        )
    if not _is_exception_type(args[3]):
        raise MarshalerError(
            "type of fourth return value was %s, not an exception type",
            _type_name(args[3]),
        )
    return args


def describe(func: Callable, request_type: Any = UNSET, response_type: Any = UNSET) -> HandlerDescriptor:
    """
    Validate a handler's shape and capture its descriptor.

    Args:
        func: Handler function
        request_type: Explicit request type, replacing the third parameter's annotation
        response_type: Explicit response type, replacing the return annotation's third slot

    Returns:
        HandlerDescriptor for the handler

    Raises:
        MarshalerError: If the handler does not fit the contract; the message
            names the rule that failed and what was found instead
    """
    if isinstance(func, type) or not (inspect.isfunction(func) or inspect.ismethod(func)):
        raise MarshalerError("kind was %s, not function", type(func).__name__)

    params = list(inspect.signature(func).parameters.values())
    if len(params) not in (3, 4) or any(p.kind not in _POSITIONAL for p in params):
        raise MarshalerError("input arity was %d, not 3 or 4", len(params))

    try:
        hints = get_type_hints(func)
    except NameError as e:
        raise MarshalerError("annotations of %s could not be resolved: %s", func.__qualname__, e)

    first = hints.get(params[0].name, UNSET)
    if first is not URL:
        raise MarshalerError(
            "type of first argument was %s, not urllib.parse.SplitResult",
            _type_name(first),
        )
    second = hints.get(params[1].name, UNSET)
    if second is not Headers:
        raise MarshalerError(
            "type of second argument was %s, not werkzeug.datastructures.Headers",
            _type_name(second),
        )
    if request_type is UNSET:
        request_type = hints.get(params[2].name, Any)
    if not is_bindable(request_type):
        raise MarshalerError(
            "type of third argument was %s, not a type the XML codec can bind",
            _type_name(request_type),
        )

    returns = _check_return(hints)
    if response_type is UNSET:
        response_type = returns[2]

    return HandlerDescriptor(
        function=func,
        request_type=request_type,
        response_type=response_type,
        arity=len(params),
    )
