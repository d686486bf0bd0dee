import dataclasses
import types
import typing
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from .exceptions import InvalidArgumentError, ValidationError

T = TypeVar('T')

def stringify(value: Any, name: str = "value") -> str:
    """Return the string form of a value, refusing values that have none."""
    if value is None:
        raise InvalidArgumentError(
            f"The parameter {name} must not be None",
            details={"parameter": name}
        )
    try:
        result = str(value)
    except TypeError as e:
        # __str__ returned something other than a string
        raise InvalidArgumentError(
            f"The parameter {name} must return a non-null value from its __str__ method",
            details={"parameter": name, "type": type(value).__name__}
        ) from e
    return result

def normalize_key(key: str) -> str:
    """Fold a member name so ``requestId``, ``RequestId`` and ``request_id`` match."""
    return key.replace('_', '').replace('-', '').lower()

def to_jsonable(value: Any) -> Any:
    """Convert a caller value into something ``json.dumps`` accepts."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: to_jsonable(getattr(value, field.name))
            for field in dataclasses.fields(value)
        }
    if isinstance(value, Enum):
        return to_jsonable(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in value]
    if hasattr(value, "to_dict") and callable(value.to_dict):
        return to_jsonable(value.to_dict())
    return value

def convert_to_type(data: Any, expected_type: Any) -> Any:
    """
    Convert decoded JSON into ``expected_type``.

    Supports dataclasses (members matched with :func:`normalize_key`),
    ``list[T]``, ``dict[str, T]``, ``Optional[T]`` and plain classes that
    accept the decoded value as keyword arguments or a single argument.

    Raises:
        ValidationError: when the data does not fit the type
    """
    if expected_type is Any or expected_type is None:
        return data

    origin = typing.get_origin(expected_type)
    args = typing.get_args(expected_type)

    if origin in (typing.Union, types.UnionType):
        if data is None and type(None) in args:
            return None
        candidates = [arg for arg in args if arg is not type(None)]
        errors = []
        for candidate in candidates:
            try:
                return convert_to_type(data, candidate)
            except ValidationError as e:
                errors.append(str(e))
        raise ValidationError(f"Value does not match any of {candidates}: {errors}")

    if origin in (list, tuple, set, frozenset):
        if not isinstance(data, list):
            raise ValidationError(f"Expected a JSON array, got {type(data).__name__}")
        item_type = args[0] if args else Any
        items = [convert_to_type(item, item_type) for item in data]
        return origin(items) if origin is not list else items

    if origin is dict:
        if not isinstance(data, dict):
            raise ValidationError(f"Expected a JSON object, got {type(data).__name__}")
        value_type = args[1] if len(args) == 2 else Any
        return {k: convert_to_type(v, value_type) for k, v in data.items()}

    if dataclasses.is_dataclass(expected_type):
        return _build_dataclass(data, expected_type)

    if expected_type in (dict, list, str, int, float, bool):
        if expected_type is float and isinstance(data, int) and not isinstance(data, bool):
            return float(data)
        if not isinstance(data, expected_type) or (expected_type is int and isinstance(data, bool)):
            raise ValidationError(
                f"Expected {expected_type.__name__}, got {type(data).__name__}"
            )
        return data

    try:
        if isinstance(data, dict):
            return expected_type(**data)
        return expected_type(data)
    except Exception as e:
        raise ValidationError(f"Type conversion failed: {str(e)}")

def _build_dataclass(data: Any, cls: Type[T]) -> T:
    if not isinstance(data, dict):
        raise ValidationError(
            f"Expected a JSON object for {cls.__name__}, got {type(data).__name__}"
        )
    hints = typing.get_type_hints(cls)
    by_key: Dict[str, Any] = {normalize_key(k): v for k, v in data.items()}
    kwargs: Dict[str, Any] = {}
    for field in dataclasses.fields(cls):
        if not field.init:
            continue
        key = normalize_key(field.name)
        if key in by_key:
            kwargs[field.name] = convert_to_type(by_key[key], hints.get(field.name, Any))
        elif (field.default is dataclasses.MISSING
              and field.default_factory is dataclasses.MISSING):
            raise ValidationError(f"Missing required member '{field.name}' for {cls.__name__}")
    try:
        return cls(**kwargs)
    except Exception as e:
        raise ValidationError(f"Type conversion failed for {cls.__name__}: {str(e)}")

def merge_headers(*sources: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Merge header mappings left to right, later sources winning."""
    result: Dict[str, str] = {}
    for source in sources:
        if source:
            result.update({str(k): str(v) for k, v in source.items()})
    return result
