"""XML binding between Python values and XML documents.

Values map onto elements the same way for encoding and decoding:

- dataclasses become an element per field, named after the field; fields set
  to ``None`` are omitted and list fields repeat the field's element once per
  item;
- ``Dict[str, T]`` becomes an element per key (list values repeat the key);
- an empty list under a field or key becomes one element carrying
  ``empty="true"``, so the field or key survives decoding;
- a list that is not a dataclass field or dict value becomes a sequence of
  ``<item>`` children;
- ``str``, ``int``, ``float``, ``bool``, ``date`` and ``datetime`` become the
  element's text.

The root element of a dataclass document is named after the class, or after
its ``__xml_name__`` attribute when it declares one.

Values bound to ``Any`` decode into a generic shape: text for leaf elements,
dicts for elements with children and lists for repeated elements. A one-item
list in an ``Any`` slot therefore decodes as its only item.
"""
import dataclasses
import re
import types
import xml.etree.ElementTree as ET
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from xmlmarshal.domain.errors import DecodeError, EncodeError

ITEM_TAG = "item"
LIST_TAG = "list"
MAP_TAG = "map"
VALUE_TAG = "value"
EMPTY_ATTR = "empty"

_SCALAR_TYPES = (str, int, float, bool, date, datetime)
_TAG_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")
_UNION_TYPES = tuple(t for t in (Union, getattr(types, "UnionType", None)) if t is not None)


def unwrap_optional(tp: Any) -> Tuple[Any, bool]:
    """Return ``(T, True)`` for ``Optional[T]`` and ``(tp, False)`` otherwise."""
    if get_origin(tp) in _UNION_TYPES:
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1 and len(get_args(tp)) == 2:
            return args[0], True
    return tp, False


def _is_list_type(tp: Any) -> bool:
    return tp is list or get_origin(tp) is list


def _is_dict_type(tp: Any) -> bool:
    return tp is dict or get_origin(tp) is dict


def _item_type(tp: Any) -> Any:
    args = get_args(tp)
    return args[0] if args else Any


def _value_type(tp: Any) -> Any:
    args = get_args(tp)
    return args[1] if len(args) == 2 else Any


def _field_types(cls: type) -> Dict[str, Any]:
    hints = get_type_hints(cls)
    return {f.name: hints.get(f.name, Any) for f in dataclasses.fields(cls)}


def is_bindable(tp: Any, _seen: Optional[set] = None) -> bool:
    """
    Check whether values of a type can be decoded from XML.

    Args:
        tp: Type to check

    Returns:
        True if the codec can bind documents to the type
    """
    if tp is Any:
        return True
    tp, _ = unwrap_optional(tp)
    if get_origin(tp) in _UNION_TYPES:
        return False
    if tp in _SCALAR_TYPES:
        return True
    # None items and values are not encoded, so containers cannot hold them
    if _is_list_type(tp):
        item_type = _item_type(tp)
        return not unwrap_optional(item_type)[1] and is_bindable(item_type, _seen)
    if _is_dict_type(tp):
        args = get_args(tp)
        if args and args[0] is not str:
            return False
        value_type = _value_type(tp)
        return not unwrap_optional(value_type)[1] and is_bindable(value_type, _seen)
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        _seen = set() if _seen is None else _seen
        if tp in _seen:
            return True
        _seen.add(tp)
        try:
            field_types = _field_types(tp)
        except NameError:
            return False
        return all(is_bindable(t, _seen) for t in field_types.values())
    return False


def zero_value(tp: Any) -> Any:
    """
    Build the zero value of a type.

    Dataclasses are built from their field defaults, using the zero value of
    the field's type where a field has none.

    Args:
        tp: Declared type

    Returns:
        A fresh zero value
    """
    if tp is Any:
        return None
    inner, optional = unwrap_optional(tp)
    if optional:
        return None
    tp = inner
    if _is_list_type(tp):
        return []
    if _is_dict_type(tp):
        return {}
    if tp is bool:
        return False
    if tp is int:
        return 0
    if tp is float:
        return 0.0
    if tp is str:
        return ""
    if tp is datetime:
        return datetime.min
    if tp is date:
        return date.min
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return _zero_dataclass(tp)
    return None


def _zero_dataclass(cls: type) -> Any:
    field_types = _field_types(cls)
    values = {}
    for f in dataclasses.fields(cls):
        if f.default is not dataclasses.MISSING:
            values[f.name] = f.default
        elif f.default_factory is not dataclasses.MISSING:
            values[f.name] = f.default_factory()
        else:
            values[f.name] = zero_value(field_types[f.name])
    try:
        return cls(**{f.name: values[f.name] for f in dataclasses.fields(cls) if f.init})
    except (TypeError, ValueError):
        # __post_init__ may reject zero values; skip it and set fields directly
        instance = cls.__new__(cls)
        for name, value in values.items():
            object.__setattr__(instance, name, value)
        return instance


# Encoding


def _root_tag(value: Any) -> str:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return getattr(type(value), "__xml_name__", type(value).__name__)
    if isinstance(value, dict):
        return MAP_TAG
    if isinstance(value, (list, tuple)):
        return LIST_TAG
    return VALUE_TAG


def _check_tag(tag: Any) -> str:
    if not isinstance(tag, str) or not _TAG_PATTERN.match(tag):
        raise EncodeError("%r is not a valid XML element name", tag)
    return tag


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _append(parent: ET.Element, tag: str, value: Any) -> None:
    """Append ``value`` to ``parent`` under ``tag``; lists repeat the tag."""
    if value is None:
        return
    if isinstance(value, (list, tuple)):
        if not value:
            ET.SubElement(parent, tag, {EMPTY_ATTR: "true"})
            return
        for item in value:
            if isinstance(item, (list, tuple)):
                _fill(ET.SubElement(parent, tag), item)
            else:
                _append(parent, tag, item)
        return
    _fill(ET.SubElement(parent, tag), value)


def _fill(element: ET.Element, value: Any) -> None:
    """Write ``value`` as the content of ``element``."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        for f in dataclasses.fields(value):
            _append(element, f.name, getattr(value, f.name))
    elif isinstance(value, dict):
        for key, item in value.items():
            _append(element, _check_tag(key), item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            if item is None:
                continue
            _fill(ET.SubElement(element, ITEM_TAG), item)
    elif isinstance(value, _SCALAR_TYPES):
        element.text = _scalar_text(value)
    else:
        raise EncodeError("unsupported type %s", type(value).__name__)


def encode(value: Any, root: Optional[str] = None) -> bytes:
    """
    Encode a value as an XML document.

    Args:
        value: Dataclass instance, dict, list or scalar
        root: Root element name, derived from the value when omitted

    Returns:
        UTF-8 encoded document with an XML declaration

    Raises:
        EncodeError: If the value holds unsupported types or invalid names
    """
    element = ET.Element(_check_tag(root or _root_tag(value)))
    _fill(element, value)
    return ET.tostring(element, encoding="utf-8", xml_declaration=True)


# Decoding


def _scalar(element: ET.Element, tp: type) -> Any:
    text = element.text or ""
    if tp is str:
        return text
    stripped = text.strip()
    try:
        if tp is bool:
            if stripped.lower() in ("true", "1"):
                return True
            if stripped.lower() in ("false", "0"):
                return False
            raise ValueError(f"invalid boolean {stripped!r}")
        if tp is int:
            return int(stripped)
        if tp is float:
            return float(stripped)
        if tp is datetime:
            return datetime.fromisoformat(stripped)
        if tp is date:
            return date.fromisoformat(stripped)
    except ValueError as e:
        raise DecodeError("cannot decode <%s> into %s: %s", element.tag, tp.__name__, e)
    raise DecodeError("unsupported type %s", tp)


def _decode_any(element: ET.Element) -> Any:
    children = list(element)
    if not children:
        if _is_empty_list(element):
            return []
        return element.text or ""
    result: Dict[str, Any] = {}
    for child in children:
        value = _decode_any(child)
        if child.tag in result:
            existing = result[child.tag]
            if isinstance(existing, list):
                existing.append(value)
            else:
                result[child.tag] = [existing, value]
        else:
            result[child.tag] = value
    return result


def _group(element: ET.Element) -> Dict[str, List[ET.Element]]:
    groups: Dict[str, List[ET.Element]] = {}
    for child in element:
        groups.setdefault(child.tag, []).append(child)
    return groups


def _is_empty_list(element: ET.Element) -> bool:
    return element.get(EMPTY_ATTR) == "true" and not len(element)


def _decode_repeated(elements: List[ET.Element], tp: Any) -> Any:
    """Decode the elements sharing one tag into a value of ``tp``."""
    inner, _ = unwrap_optional(tp)
    if inner is Any or _is_list_type(inner):
        if len(elements) == 1 and _is_empty_list(elements[0]):
            return []
    if _is_list_type(inner):
        return [_decode_element(e, _item_type(inner)) for e in elements]
    if inner is Any and len(elements) > 1:
        return [_decode_any(e) for e in elements]
    return _decode_element(elements[0], tp)


def _decode_dataclass(element: ET.Element, cls: type) -> Any:
    field_types = _field_types(cls)
    groups = _group(element)
    values = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        if f.name in groups:
            values[f.name] = _decode_repeated(groups[f.name], field_types[f.name])
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            values[f.name] = zero_value(field_types[f.name])
    try:
        return cls(**values)
    except Exception as e:
        raise DecodeError("cannot decode <%s> into %s: %s", element.tag, cls.__name__, e)


def _decode_element(element: ET.Element, tp: Any) -> Any:
    if tp is Any:
        return _decode_any(element)
    tp, _ = unwrap_optional(tp)
    if _is_list_type(tp):
        item_type = _item_type(tp)
        return [_decode_element(child, item_type) for child in element]
    if _is_dict_type(tp):
        value_type = _value_type(tp)
        return {tag: _decode_repeated(children, value_type) for tag, children in _group(element).items()}
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return _decode_dataclass(element, tp)
    if tp in _SCALAR_TYPES:
        return _scalar(element, tp)
    raise DecodeError("unsupported type %s", tp)


def decode(data: Union[bytes, str], tp: Any) -> Any:
    """
    Decode an XML document into a fresh value of ``tp``.

    Args:
        data: The document
        tp: Declared destination type

    Returns:
        Decoded value

    Raises:
        DecodeError: If the document is malformed or does not fit ``tp``
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise DecodeError("malformed XML document: %s", e)
    try:
        return _decode_element(root, tp)
    except RecursionError:
        raise DecodeError("document nested too deeply")


def decode_stream(stream, tp: Any) -> Any:
    """
    Decode an XML document read from a binary stream.

    Args:
        stream: File-like object with a ``read`` method
        tp: Declared destination type

    Returns:
        Decoded value
    """
    return decode(stream.read(), tp)
