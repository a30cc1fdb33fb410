# fastapi_mongo_querybuilder/introspection.py

import logging
import re
import types
from collections.abc import MutableSequence, MutableSet, Sequence, Set
from enum import Enum
from functools import lru_cache
from typing import (
    Annotated,
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Tuple,
    Type,
    Union,
    get_args,
    get_origin,
)

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from .params import META_PARAMETERS, ParameterKind

logger = logging.getLogger(__name__)

# modifiers of the document serializer, never a field name
NON_NAMING_TOKENS = frozenset({"omitempty", "minsize", "inline"})
NAMING_NAMESPACE = "bson"

_NAMESPACED_TAG = re.compile(r'(\w+):"([^"]*)"')
_SEQUENCE_ORIGINS = (list, tuple, set, frozenset, Sequence, MutableSequence, Set, MutableSet)


class FieldDescriptor(NamedTuple):
    attribute: str
    name: str
    kind: Optional[ParameterKind]
    key: str
    model: Optional[Type[BaseModel]] = None
    nested: Tuple["FieldDescriptor", ...] = ()

    @property
    def is_nested(self) -> bool:
        return self.model is not None


def parse_name_tag(tag: str) -> Optional[str]:
    """
    Extract the field name from a tag such as ``"membername,omitempty"``.

    Serializer modifiers are dropped and the first remaining token is the
    name. Returns None when no name is left (``",omitempty"``).
    """
    for token in tag.split(","):
        token = token.strip()
        if token in NON_NAMING_TOKENS:
            continue
        return token or None
    return None


def _name_override(field_info: FieldInfo, metadata: List[Any]) -> Optional[str]:
    tags = [item for item in metadata if isinstance(item, str)]

    for tag in tags:
        namespaces = dict(_NAMESPACED_TAG.findall(tag))
        if NAMING_NAMESPACE in namespaces:
            name = parse_name_tag(namespaces[NAMING_NAMESPACE])
            if name:
                return name

    for alias in (field_info.serialization_alias, field_info.alias):
        if alias:
            name = parse_name_tag(alias)
            if name:
                return name

    for tag in tags:
        # namespaced tags of other libraries (json:"x" validate:"y")
        if ":" in tag:
            continue
        name = parse_name_tag(tag)
        if name:
            return name
    return None


def _unwrap(annotation: Any, metadata: Iterable[Any]) -> Tuple[Any, List[Any]]:
    metadata = list(metadata)
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            annotation, *extra = get_args(annotation)
            metadata.extend(extra)
        elif origin is Union or origin is types.UnionType:
            args = [arg for arg in get_args(annotation) if arg is not type(None)]
            if len(args) != 1:
                return annotation, metadata
            annotation = args[0]
        else:
            return annotation, metadata


def _is_unsigned(metadata: List[Any]) -> bool:
    for item in metadata:
        ge = getattr(item, "ge", None)
        gt = getattr(item, "gt", None)
        if isinstance(ge, (int, float)) and ge >= 0:
            return True
        if isinstance(gt, (int, float)) and gt >= 0:
            return True
    return False


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _scalar_kind(annotation: Any, metadata: List[Any]) -> ParameterKind:
    if not isinstance(annotation, type):
        return ParameterKind.OTHER
    if issubclass(annotation, Enum):
        if issubclass(annotation, str):
            return ParameterKind.STRING
        if issubclass(annotation, int) and not issubclass(annotation, bool):
            return ParameterKind.INT
        return ParameterKind.OTHER
    if issubclass(annotation, bool):
        return ParameterKind.BOOL
    if issubclass(annotation, int):
        return ParameterKind.UINT if _is_unsigned(metadata) else ParameterKind.INT
    if issubclass(annotation, float):
        return ParameterKind.FLOAT
    if issubclass(annotation, str):
        return ParameterKind.STRING
    return ParameterKind.OTHER


@lru_cache(maxsize=None)
def describe_model(model: Type[BaseModel]) -> Tuple[FieldDescriptor, ...]:
    """
    Build the field descriptor table of a pydantic model.

    Each descriptor carries the externally visible name (lower-cased
    attribute name unless a naming annotation overrides it), the parameter
    kind and, for nested models, the descriptors of the nested fields.
    Collection fields are described by their element kind.
    """
    descriptors = []
    for attribute, field_info in model.model_fields.items():
        annotation, metadata = _unwrap(field_info.annotation, field_info.metadata)
        name = _name_override(field_info, metadata) or attribute.lower()
        key = field_info.alias or attribute

        if _is_model(annotation):
            descriptors.append(
                FieldDescriptor(attribute, name, None, key, annotation, describe_model(annotation))
            )
            continue

        if get_origin(annotation) in _SEQUENCE_ORIGINS:
            args = get_args(annotation)
            element, element_metadata = _unwrap(args[0] if args else Any, ())
            kind = _scalar_kind(element, element_metadata)
        else:
            kind = _scalar_kind(annotation, metadata)
        descriptors.append(FieldDescriptor(attribute, name, kind, key))

    logger.debug("described %s: %d fields", model.__name__, len(descriptors))
    return tuple(descriptors)


def _model_class(schema: Any) -> Type[BaseModel]:
    return schema if isinstance(schema, type) else type(schema)


def _collect(
    descriptors: Tuple[FieldDescriptor, ...],
    disabled: frozenset,
    parameters: Dict[str, ParameterKind],
) -> None:
    for descriptor in descriptors:
        if descriptor.is_nested:
            _collect(descriptor.nested, disabled, parameters)
        elif descriptor.name not in disabled:
            parameters[descriptor.name] = descriptor.kind


def build_parameter_map(schema: Any, disabled: Iterable[str] = ()) -> Dict[str, ParameterKind]:
    """
    Map every valid query parameter of ``schema`` to its kind.

    Nested models are flattened into the same namespace and the meta
    parameters are merged in. Names in ``disabled`` are left out.
    """
    disabled = frozenset(disabled)
    parameters: Dict[str, ParameterKind] = {}
    _collect(describe_model(_model_class(schema)), disabled, parameters)

    for name, kind in META_PARAMETERS.items():
        if name not in disabled:
            parameters[name] = kind
    return parameters


def _nest(descriptors: Tuple[FieldDescriptor, ...], row: Mapping[str, Any], validate: bool) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for descriptor in descriptors:
        if descriptor.is_nested:
            nested = _nest(descriptor.nested, row, validate)
            # an absent record is stored as all-NULL columns
            if any(value is not None for value in nested.values()):
                values[descriptor.key] = (
                    nested if validate else descriptor.model.model_construct(**nested)
                )
        elif descriptor.name in row:
            values[descriptor.key] = row[descriptor.name]
    return values


def build_record(model: Type[BaseModel], row: Mapping[str, Any], validate: bool = True) -> BaseModel:
    """Rebuild a model instance from a flat row keyed by parameter names."""
    values = _nest(describe_model(model), row, validate)
    if validate:
        return model.model_validate(values)
    return model.model_construct(**values)
