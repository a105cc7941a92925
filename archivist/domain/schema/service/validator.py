"""Schema validation of record representations.

Validation is a pure function of (schema catalog, input, settings): nothing
here touches storage, and the severity mode is passed in per call.
"""

import logging
import re
from datetime import date
from typing import Any, Mapping

from archivist.domain.schema.model.result import RecordDraft, SubRecordDraft, ValidationResult
from archivist.domain.schema.model.value import (
    STRICT,
    Cardinality,
    FieldDefinition,
    FieldType,
    NumberConstraints,
    RefConstraints,
    TextConstraints,
    ValidationSettings,
)
from archivist.domain.schema.port.catalog import SchemaCatalog
from archivist.domain.shared.error import ValidationError
from archivist.domain.shared.model.record_type import RecordType
from archivist.domain.shared.model.uri import RecordURI
from archivist.domain.shared.service import Service

logger = logging.getLogger(__name__)

# Attributes the store owns or derives; never validated against a schema.
RESERVED_ATTRIBUTES = frozenset(
    {
        "uri",
        "id",
        "jsonmodel_type",
        "lock_version",
        "version",
        "suppressed",
        "repository",
        "created_at",
        "updated_at",
    }
)
SUBRECORD_KEY = "_key"
RESERVED_SUBRECORD_ATTRIBUTES = frozenset({SUBRECORD_KEY, "lock_version", "jsonmodel_type"})

_DATE_RE = re.compile(r"^(\d{4})(?:-(\d{2})(?:-(\d{2}))?)?$")
_MISSING = object()


class _Collector:
    def __init__(self, settings: ValidationSettings) -> None:
        self.settings = settings
        self.errors: dict[str, str] = {}
        self.warnings: dict[str, str] = {}

    def error(self, path: str, reason: str) -> None:
        self.errors.setdefault(path, reason)

    def warn(self, path: str, reason: str) -> None:
        self.warnings.setdefault(path, reason)


def _join(prefix: str, name: str | int) -> str:
    return f"{prefix}/{name}" if prefix else str(name)


def _is_absent(value: Any) -> bool:
    return value is _MISSING or value is None or value == "" or value == []


class SchemaValidator(Service):
    """Validates representations against schemas looked up by record type name."""

    catalog: SchemaCatalog

    def validate(
        self,
        record_type: str,
        attributes: Mapping[str, Any],
        settings: ValidationSettings = STRICT,
    ) -> ValidationResult:
        schema = self.catalog.get(str(record_type))
        if schema is None:
            return ValidationResult(errors={"type": f"unknown record type '{record_type}'"})

        known = {t.value: t for t in RecordType}
        collections = known[str(record_type)].collections if str(record_type) in known else ()

        out = _Collector(settings)
        normalised = self._check_object(
            schema.fields,
            attributes,
            "",
            out,
            reserved=RESERVED_ATTRIBUTES | {c.attribute for c in collections},
        )

        for collection in collections:
            normalised[collection.attribute] = self._check_collection(
                collection.attribute,
                collection.schema,
                collection.min_items,
                attributes.get(collection.attribute, _MISSING),
                out,
            )

        return ValidationResult(
            errors=out.errors,
            warnings=out.warnings,
            attributes=normalised,
        )

    def from_representation(
        self,
        record_type: RecordType | str,
        attributes: Mapping[str, Any],
        settings: ValidationSettings = STRICT,
    ) -> RecordDraft:
        """Validate and build a draft, or raise ValidationError with errors and warnings."""
        result = self.validate(record_type, attributes, settings)
        if not result.valid:
            logger.debug(
                "Validation failed for %s: errors=%s warnings=%s",
                record_type,
                sorted(result.errors),
                sorted(result.warnings),
            )
            raise ValidationError(
                f"Invalid {record_type}: {len(result.errors)} error(s)",
                errors=result.errors,
                warnings=result.warnings,
            )

        try:
            rtype = RecordType(str(record_type))
        except ValueError:
            raise ValidationError(
                f"{record_type} is not a top-level record type", field="type"
            ) from None
        attrs = dict(result.attributes)
        collections: dict[str, list[SubRecordDraft]] = {}
        for collection in rtype.collections:
            members = attrs.pop(collection.attribute, [])
            collections[collection.attribute] = [
                SubRecordDraft(
                    key=member.get(SUBRECORD_KEY),
                    data={k: v for k, v in member.items() if k != SUBRECORD_KEY},
                )
                for member in members
            ]
        return RecordDraft(
            record_type=rtype,
            attributes=attrs,
            collections=collections,
            warnings=result.warnings,
        )

    # -- internals ---------------------------------------------------------

    def _check_collection(
        self,
        attribute: str,
        schema_name: str,
        min_items: int,
        value: Any,
        out: _Collector,
    ) -> list[dict[str, Any]]:
        schema = self.catalog.get(schema_name)
        if schema is None:
            out.error(attribute, f"unknown sub-record type '{schema_name}'")
            return []

        if _is_absent(value):
            if min_items > 0:
                out.error(attribute, "is required")
            return []
        if not isinstance(value, list):
            out.error(attribute, "must be a list")
            return []
        if len(value) < min_items:
            out.error(attribute, f"must contain at least {min_items} item(s)")

        members: list[dict[str, Any]] = []
        for i, item in enumerate(value):
            path = _join(attribute, i)
            if not isinstance(item, Mapping):
                out.error(path, "must be an object")
                continue
            member = self._check_object(
                schema.fields, item, path, out, reserved=RESERVED_SUBRECORD_ATTRIBUTES
            )
            key = item.get(SUBRECORD_KEY)
            if key is not None:
                if not isinstance(key, str):
                    out.error(_join(path, SUBRECORD_KEY), "must be a string")
                else:
                    member[SUBRECORD_KEY] = key
            members.append(member)
        return members

    def _check_object(
        self,
        fields: list[FieldDefinition],
        data: Mapping[str, Any],
        prefix: str,
        out: _Collector,
        reserved: frozenset[str] = frozenset(),
    ) -> dict[str, Any]:
        result: dict[str, Any] = {}
        declared = {f.name for f in fields}

        for f in fields:
            path = _join(prefix, f.name)
            value = data.get(f.name, _MISSING)

            if _is_absent(value):
                if f.required:
                    out.error(path, "is required")
                elif f.default is not None:
                    result[f.name] = f.default
                elif f.recommended:
                    if out.settings.elevate_recommended:
                        out.error(path, "is recommended")
                    else:
                        out.warn(path, "is recommended")
                continue

            if f.is_list:
                result[f.name] = self._check_list(f, value, path, out)
            else:
                checked = self._check_value(f, value, path, out)
                if checked is not _MISSING:
                    result[f.name] = checked

        for name in data:
            if name in declared or name in reserved:
                continue
            if not out.settings.coerce:
                out.warn(_join(prefix, name), "is not a recognised attribute")

        return result

    def _check_list(self, f: FieldDefinition, value: Any, path: str, out: _Collector) -> list:
        if not isinstance(value, list):
            if out.settings.coerce:
                value = [value]
            else:
                out.error(path, "must be a list")
                return []

        if f.cardinality == Cardinality.ONE_OR_MORE and not value:
            out.error(path, "must contain at least one item")

        items = []
        for i, item in enumerate(value):
            checked = self._check_value(f, item, _join(path, i), out)
            if checked is not _MISSING:
                items.append(checked)
        return items

    def _check_value(self, f: FieldDefinition, value: Any, path: str, out: _Collector) -> Any:
        coerce = out.settings.coerce

        match f.type:
            case FieldType.STRING:
                if isinstance(value, (int, float)) and not isinstance(value, bool) and coerce:
                    value = str(value)
                if not isinstance(value, str):
                    out.error(path, "must be a string")
                    return _MISSING
                _check_text(f.constraints, value, path, out)
                return value

            case FieldType.INTEGER:
                value = _coerce_number(value, integer=True) if coerce else value
                if isinstance(value, bool) or not isinstance(value, int):
                    out.error(path, "must be an integer")
                    return _MISSING
                _check_number(f.constraints, value, path, out)
                return value

            case FieldType.NUMBER:
                value = _coerce_number(value, integer=False) if coerce else value
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    out.error(path, "must be a number")
                    return _MISSING
                _check_number(f.constraints, value, path, out)
                return value

            case FieldType.BOOLEAN:
                if coerce and isinstance(value, str) and value.lower() in ("true", "false"):
                    value = value.lower() == "true"
                if not isinstance(value, bool):
                    out.error(path, "must be a boolean")
                    return _MISSING
                return value

            case FieldType.DATE:
                if coerce and isinstance(value, date):
                    value = value.isoformat()
                if not isinstance(value, str) or not _valid_date(value):
                    out.error(path, "must be a date (YYYY, YYYY-MM or YYYY-MM-DD)")
                    return _MISSING
                return value

            case FieldType.REF:
                return _check_ref(f.constraints, value, path, out)

            case FieldType.OBJECT:
                if not isinstance(value, Mapping):
                    out.error(path, "must be an object")
                    return _MISSING
                return self._check_object(f.fields or [], value, path, out)

        raise AssertionError(f"unhandled field type {f.type}")  # pragma: no cover


def _coerce_number(value: Any, *, integer: bool) -> Any:
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return value
        value = number
    if integer and isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _valid_date(value: str) -> bool:
    m = _DATE_RE.match(value)
    if not m:
        return False
    year, month, day = (int(g) if g else None for g in m.groups())
    try:
        date(year, month or 1, day or 1)  # type: ignore[arg-type]
    except ValueError:
        return False
    return True


def _check_text(constraints: Any, value: str, path: str, out: _Collector) -> None:
    if not isinstance(constraints, TextConstraints):
        return
    if constraints.min_length is not None and len(value) < constraints.min_length:
        out.error(path, f"must be at least {constraints.min_length} characters")
    if constraints.max_length is not None and len(value) > constraints.max_length:
        out.error(path, f"must be at most {constraints.max_length} characters")
    if constraints.pattern is not None and not re.fullmatch(constraints.pattern, value):
        out.error(path, f"must match pattern {constraints.pattern}")
    if constraints.choices is not None and value not in constraints.choices:
        out.error(path, f"must be one of: {', '.join(constraints.choices)}")


def _check_number(constraints: Any, value: float, path: str, out: _Collector) -> None:
    if not isinstance(constraints, NumberConstraints):
        return
    if constraints.min_value is not None and value < constraints.min_value:
        out.error(path, f"must be >= {constraints.min_value}")
    if constraints.max_value is not None and value > constraints.max_value:
        out.error(path, f"must be <= {constraints.max_value}")


def _check_ref(constraints: Any, value: Any, path: str, out: _Collector) -> Any:
    if not isinstance(value, str):
        out.error(path, "must be a record URI")
        return _MISSING
    try:
        uri = RecordURI.parse(value)
    except ValueError:
        out.error(path, "must be a record URI")
        return _MISSING
    if (
        isinstance(constraints, RefConstraints)
        and constraints.record_types is not None
        and uri.record_type not in constraints.record_types
    ):
        allowed = ", ".join(t.value for t in constraints.record_types)
        out.error(path, f"must reference one of: {allowed}")
    return str(uri)

