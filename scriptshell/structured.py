#!/usr/bin/env python3
"""
Structured values decoded from command output.

JsonValue is a tagged wrapper over parsed JSON with explicit lookups, for
callers that do not have a target type. decode() and decode_xml() turn
parsed data into dataclasses and typed containers for callers that do.
"""

import dataclasses
import types
import typing
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union
from xml.etree import ElementTree


class JsonKind(Enum):
    """The six shapes a JSON value can take."""
    NULL = 'null'
    BOOL = 'bool'
    NUMBER = 'number'
    STRING = 'string'
    ARRAY = 'array'
    OBJECT = 'object'


def _kind_of(value: Any) -> JsonKind:
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"not a JSON value: {type(value).__name__}")


class JsonValue:
    """
    Immutable view of a parsed JSON value.

    Lookups are explicit: ``value['name']`` on an object, ``value[0]`` on an
    array. A missing key raises KeyError and a lookup on the wrong kind
    raises TypeError.
    """

    __slots__ = ('_value', '_kind')

    def __init__(self, value: Any):
        self._kind = _kind_of(value)
        self._value = value

    @property
    def kind(self) -> JsonKind:
        return self._kind

    @property
    def value(self) -> Any:
        """The underlying Python value (dict, list, str, number, bool or None)."""
        return self._value

    @property
    def is_null(self) -> bool:
        return self._kind is JsonKind.NULL

    def _expect(self, *kinds: JsonKind) -> None:
        if self._kind not in kinds:
            expected = ' or '.join(k.value for k in kinds)
            raise TypeError(f"expected JSON {expected}, got {self._kind.value}")

    def __getitem__(self, key: Union[str, int]) -> 'JsonValue':
        if isinstance(key, str):
            self._expect(JsonKind.OBJECT)
        else:
            self._expect(JsonKind.ARRAY)
        return JsonValue(self._value[key])

    def get(self, key: str, default: Any = None) -> Any:
        """Field lookup on an object that returns ``default`` when missing."""
        self._expect(JsonKind.OBJECT)
        if key not in self._value:
            return default
        return JsonValue(self._value[key])

    def keys(self) -> List[str]:
        self._expect(JsonKind.OBJECT)
        return list(self._value.keys())

    def __contains__(self, key: Any) -> bool:
        if self._kind in (JsonKind.OBJECT, JsonKind.ARRAY):
            return key in self._value
        return False

    def __len__(self) -> int:
        self._expect(JsonKind.ARRAY, JsonKind.OBJECT, JsonKind.STRING)
        return len(self._value)

    def __iter__(self) -> Iterator['JsonValue']:
        """Array elements, or object keys wrapped as strings."""
        self._expect(JsonKind.ARRAY, JsonKind.OBJECT)
        for item in self._value:
            yield JsonValue(item)

    # Typed readers

    def as_str(self) -> str:
        self._expect(JsonKind.STRING)
        return self._value

    def as_int(self) -> int:
        self._expect(JsonKind.NUMBER)
        return int(self._value)

    def as_float(self) -> float:
        self._expect(JsonKind.NUMBER)
        return float(self._value)

    def as_bool(self) -> bool:
        self._expect(JsonKind.BOOL)
        return self._value

    def as_list(self) -> List['JsonValue']:
        self._expect(JsonKind.ARRAY)
        return [JsonValue(item) for item in self._value]

    def as_dict(self) -> Dict[str, 'JsonValue']:
        self._expect(JsonKind.OBJECT)
        return {key: JsonValue(item) for key, item in self._value.items()}

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, JsonValue):
            return self._kind is other._kind and self._value == other._value
        return self._value == other

    def __hash__(self):
        return hash((self._kind, repr(self._value)))

    def __repr__(self) -> str:
        return f"JsonValue({self._value!r})"


# Typed decoding

def _is_union(origin: Any) -> bool:
    return origin is Union or origin is getattr(types, 'UnionType', None)


def _field_types(target: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(target)
    except (NameError, TypeError):
        return {f.name: f.type for f in dataclasses.fields(target)}


def _json_name(field: dataclasses.Field) -> str:
    return field.metadata.get('json', field.name)


def decode(data: Any, target: Any) -> Any:
    """Decode parsed JSON ``data`` into ``target``.

    ``target`` may be a dataclass, ``List[T]``, ``Dict[str, T]``,
    ``Optional[T]``, a primitive type or any callable taking one argument.

    Raises:
        TypeError, ValueError, KeyError: If ``data`` does not fit ``target``.
    """
    if target is Any or target is None:
        return data

    origin = typing.get_origin(target)
    args = typing.get_args(target)

    if _is_union(origin):
        if data is None and type(None) in args:
            return None
        candidates = [arg for arg in args if arg is not type(None)]
        if len(candidates) == 1:
            return decode(data, candidates[0])
        return data

    if origin in (list, List):
        if not isinstance(data, list):
            raise TypeError(f"expected a JSON array, got {type(data).__name__}")
        item_type = args[0] if args else Any
        return [decode(item, item_type) for item in data]

    if origin in (dict, Dict):
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        value_type = args[1] if len(args) == 2 else Any
        return {key: decode(item, value_type) for key, item in data.items()}

    if dataclasses.is_dataclass(target) and isinstance(target, type):
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object for {target.__name__}, got {type(data).__name__}")
        hints = _field_types(target)
        kwargs = {}
        for field in dataclasses.fields(target):
            name = _json_name(field)
            if name in data:
                kwargs[field.name] = decode(data[name], hints.get(field.name, Any))
        return target(**kwargs)

    if target is float and isinstance(data, int) and not isinstance(data, bool):
        return float(data)

    if target in (str, int, bool) and not isinstance(data, target):
        raise TypeError(f"expected {target.__name__}, got {type(data).__name__}")

    if isinstance(target, type) and isinstance(data, target):
        return data

    return target(data)


def _coerce_text(text: Optional[str], target: Any) -> Any:
    if _is_union(typing.get_origin(target)):
        candidates = [arg for arg in typing.get_args(target) if arg is not type(None)]
        if text is None:
            return None
        target = candidates[0] if candidates else str

    text = (text or '').strip()
    if target is bool:
        lowered = text.lower()
        if lowered in ('true', '1'):
            return True
        if lowered in ('false', '0'):
            return False
        raise ValueError(f"not a boolean: {text!r}")
    if target in (int, float):
        return target(text)
    if target is Any or target is str:
        return text
    return target(text)


def decode_xml(element: ElementTree.Element, target: Any) -> Any:
    """Decode an XML element into the dataclass ``target``.

    Fields are matched against child element tags first, then attributes,
    ignoring case. Child elements of a nested dataclass field are decoded
    recursively.
    """
    if not (dataclasses.is_dataclass(target) and isinstance(target, type)):
        return _coerce_text(element.text, target)

    children = {child.tag.lower(): child for child in element}
    attributes = {name.lower(): value for name, value in element.attrib.items()}
    hints = _field_types(target)

    kwargs = {}
    for field in dataclasses.fields(target):
        key = field.metadata.get('xml', field.name).lower()
        field_type = hints.get(field.name, str)
        if _is_union(typing.get_origin(field_type)):
            candidates = [arg for arg in typing.get_args(field_type) if arg is not type(None)]
            if len(candidates) == 1 and dataclasses.is_dataclass(candidates[0]):
                field_type = candidates[0]
        if key in children:
            child = children[key]
            if dataclasses.is_dataclass(field_type):
                kwargs[field.name] = decode_xml(child, field_type)
            else:
                kwargs[field.name] = _coerce_text(child.text, field_type)
        elif key in attributes:
            kwargs[field.name] = _coerce_text(attributes[key], field_type)
    return target(**kwargs)
