"""Record introspection: turning a record into field descriptors.

Three record shapes carry rule strings:

* dataclass instances, via ``field(metadata={"validate": "..."})``
* pydantic model instances, via ``Field(json_schema_extra={"validate": "..."})``
* ``MappingRecord``, an explicit rule table paired with a plain mapping

A leading underscore marks a field as not exported.
"""

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from tagval.errors import NotAStructError

DEFAULT_TAG_KEY = "validate"


@dataclass(frozen=True)
class FieldDescriptor:
    """A record field as seen by the validator."""
    name: str
    exported: bool
    rules: str
    value: Any = None
    # rule value under the tag key was not a string; rules holds its repr
    malformed: bool = False


@dataclass(frozen=True)
class MappingRecord:
    """A plain mapping validated against a rule table.

    Fields are the keys of ``rules`` in insertion order. A key missing from
    ``values`` is validated as ``None``.
    """
    values: Mapping[str, Any]
    rules: Mapping[str, str] = field(default_factory=dict)


def _rule_string(raw: Any) -> tuple[str, bool]:
    """Normalise a stored rule value to (rule string, malformed)."""
    if raw is None:
        return "", False
    if isinstance(raw, str):
        return raw, False
    return repr(raw), True


def is_exported(name: str) -> bool:
    return not name.startswith("_")


def is_record(value: object) -> bool:
    """Whether value is a record instance tagval knows how to inspect."""
    if isinstance(value, type):
        return False
    return (
        dataclasses.is_dataclass(value)
        or isinstance(value, BaseModel)
        or isinstance(value, MappingRecord)
    )


def _dataclass_fields(record: Any, tag_key: str) -> list[FieldDescriptor]:
    descriptors = []
    for f in dataclasses.fields(record):
        rules, malformed = _rule_string(f.metadata.get(tag_key))
        descriptors.append(
            FieldDescriptor(
                name=f.name,
                exported=is_exported(f.name),
                rules=rules,
                value=getattr(record, f.name, None),
                malformed=malformed,
            )
        )
    return descriptors


def _model_fields(record: BaseModel, tag_key: str) -> list[FieldDescriptor]:
    descriptors = []
    for name, info in type(record).model_fields.items():
        extra = info.json_schema_extra
        rules, malformed = _rule_string(extra.get(tag_key) if isinstance(extra, dict) else None)
        descriptors.append(
            FieldDescriptor(
                name=name,
                exported=is_exported(name),
                rules=rules,
                value=getattr(record, name, None),
                malformed=malformed,
            )
        )
    return descriptors


def _mapping_fields(record: MappingRecord) -> list[FieldDescriptor]:
    descriptors = []
    for name, raw in record.rules.items():
        rules, malformed = _rule_string(raw)
        descriptors.append(
            FieldDescriptor(
                name=name,
                exported=is_exported(name),
                rules=rules,
                value=record.values.get(name),
                malformed=malformed,
            )
        )
    return descriptors


def describe_fields(record: object, tag_key: str = DEFAULT_TAG_KEY) -> list[FieldDescriptor]:
    """List the fields of a record in declaration order.

    Args:
        record: Dataclass instance, pydantic model instance or MappingRecord
        tag_key: Metadata key holding the rule string

    Returns:
        One descriptor per field

    Raises:
        NotAStructError: If record is not a supported record instance
    """
    if not is_record(record):
        raise NotAStructError(record)

    if isinstance(record, MappingRecord):
        return _mapping_fields(record)
    if isinstance(record, BaseModel):
        return _model_fields(record, tag_key)
    return _dataclass_fields(record, tag_key)
