"""
Base models for the Databricks REST client.

These models define the structures shared by SQL statement responses, plus the
small field decoders every response model uses. Decoders raise
``SerializationError`` carrying the dotted path of the offending field, so a
malformed body never yields a partially populated record.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from dateutil.parser import isoparse

from databricks.rest.exc import SerializationError
from databricks.rest.types import Format, StatementState

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E")

_INT_PATTERN = re.compile(r"-?\d+")


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _expect_mapping(value: Any, path: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise SerializationError(
            f"Expected a JSON object at '{path or '<root>'}', got {type(value).__name__}",
            field=path or None,
        )
    return value


def _require(data: Dict[str, Any], key: str, path: str) -> Any:
    value = data.get(key)
    if value is None:
        full = _join(path, key)
        raise SerializationError(f"Missing required field '{full}'", field=full)
    return value


def _str(value: Any, path: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SerializationError(
            f"Expected a string at '{path}', got {type(value).__name__}", field=path
        )
    return value


def _int(value: Any, path: str) -> Optional[int]:
    # int64 fields are sometimes sent as JSON strings
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and _INT_PATTERN.fullmatch(value):
        return int(value)
    raise SerializationError(
        f"Expected an integer at '{path}', got {value!r}", field=path
    )


def _float(value: Any, path: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise SerializationError(f"Expected a number at '{path}', got bool", field=path)
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise SerializationError(
            f"Expected a number at '{path}', got {value!r}", field=path
        ) from e


def _bool(value: Any, path: str) -> Optional[bool]:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise SerializationError(
            f"Expected a boolean at '{path}', got {type(value).__name__}", field=path
        )
    return value


def _enum(enum_cls: Type[E], value: Any, path: str) -> Optional[E]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SerializationError(
            f"Expected a string at '{path}', got {type(value).__name__}", field=path
        )
    return enum_cls(value)  # type: ignore[call-arg]


def _list(
    value: Any, path: str, item: Callable[[Any, str], T]
) -> Optional[List[T]]:
    if value is None:
        return None
    if not isinstance(value, list):
        raise SerializationError(
            f"Expected a JSON array at '{path}', got {type(value).__name__}", field=path
        )
    return [item(v, f"{path}[{i}]") for i, v in enumerate(value)]


def _str_map(value: Any, path: str) -> Optional[Dict[str, str]]:
    if value is None:
        return None
    mapping = _expect_mapping(value, path)
    return {k: _str(_require(mapping, k, path), _join(path, k)) for k in mapping}


def _datetime(value: Any, path: str) -> Optional[datetime]:
    text = _str(value, path)
    if text is None:
        return None
    try:
        parsed = isoparse(text)
    except ValueError as e:
        raise SerializationError(
            f"Expected an ISO-8601 timestamp at '{path}', got {text!r}", field=path
        ) from e
    # timestamps without an offset are UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _base64(value: Any, path: str) -> Optional[bytes]:
    text = _str(value, path)
    if text is None:
        return None
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SerializationError(f"Invalid base64 payload at '{path}'", field=path) from e


@dataclass(frozen=True)
class ServiceError:
    """Error information returned by the API inside a statement status."""

    error_code: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, path: str = "error") -> "ServiceError":
        data = _expect_mapping(data, path)
        return cls(
            error_code=_str(data.get("error_code"), _join(path, "error_code")),
            message=_str(data.get("message"), _join(path, "message")),
        )


@dataclass(frozen=True)
class StatementStatus:
    """Status information for a statement execution."""

    state: StatementState
    error: Optional[ServiceError] = None
    sql_state: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, path: str = "status") -> "StatementStatus":
        data = _expect_mapping(data, path)
        state = _enum(StatementState, _require(data, "state", path), _join(path, "state"))
        error = None
        if data.get("error") is not None:
            error = ServiceError.from_dict(data["error"], _join(path, "error"))
        return cls(
            state=state,
            error=error,
            sql_state=_str(data.get("sql_state"), _join(path, "sql_state")),
        )


@dataclass(frozen=True)
class ColumnInfo:
    """Description of one result column."""

    name: str
    type_name: str
    position: int
    type_text: Optional[str] = None
    type_precision: Optional[int] = None
    type_scale: Optional[int] = None
    type_interval_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "ColumnInfo":
        data = _expect_mapping(data, path)
        return cls(
            name=_str(_require(data, "name", path), _join(path, "name")),
            type_name=_str(_require(data, "type_name", path), _join(path, "type_name")),
            position=_int(_require(data, "position", path), _join(path, "position")),
            type_text=_str(data.get("type_text"), _join(path, "type_text")),
            type_precision=_int(data.get("type_precision"), _join(path, "type_precision")),
            type_scale=_int(data.get("type_scale"), _join(path, "type_scale")),
            type_interval_type=_str(
                data.get("type_interval_type"), _join(path, "type_interval_type")
            ),
        )


@dataclass(frozen=True)
class ResultSchema:
    """Ordered column descriptions of a result set."""

    columns: List[ColumnInfo] = field(default_factory=list)
    column_count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "ResultSchema":
        data = _expect_mapping(data, path)
        columns = _list(data.get("columns"), _join(path, "columns"), ColumnInfo.from_dict)
        return cls(
            columns=columns or [],
            column_count=_int(data.get("column_count"), _join(path, "column_count")),
        )


@dataclass(frozen=True)
class ChunkInfo:
    """Information about a chunk in the result set."""

    chunk_index: int
    row_offset: int
    row_count: int
    byte_count: Optional[int] = None
    next_chunk_index: Optional[int] = None
    next_chunk_internal_link: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "ChunkInfo":
        data = _expect_mapping(data, path)
        return cls(
            chunk_index=_int(_require(data, "chunk_index", path), _join(path, "chunk_index")),
            row_offset=_int(_require(data, "row_offset", path), _join(path, "row_offset")),
            row_count=_int(_require(data, "row_count", path), _join(path, "row_count")),
            byte_count=_int(data.get("byte_count"), _join(path, "byte_count")),
            next_chunk_index=_int(
                data.get("next_chunk_index"), _join(path, "next_chunk_index")
            ),
            next_chunk_internal_link=_str(
                data.get("next_chunk_internal_link"),
                _join(path, "next_chunk_internal_link"),
            ),
        )


@dataclass(frozen=True)
class ExternalLink:
    """Presigned URL for one chunk of an EXTERNAL_LINKS result."""

    external_link: str
    chunk_index: int
    row_offset: int
    row_count: int
    byte_count: Optional[int] = None
    expiration: Optional[datetime] = None
    next_chunk_index: Optional[int] = None
    next_chunk_internal_link: Optional[str] = None
    http_headers: Optional[Dict[str, str]] = None

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "ExternalLink":
        data = _expect_mapping(data, path)
        return cls(
            external_link=_str(
                _require(data, "external_link", path), _join(path, "external_link")
            ),
            chunk_index=_int(_require(data, "chunk_index", path), _join(path, "chunk_index")),
            row_offset=_int(_require(data, "row_offset", path), _join(path, "row_offset")),
            row_count=_int(_require(data, "row_count", path), _join(path, "row_count")),
            byte_count=_int(data.get("byte_count"), _join(path, "byte_count")),
            expiration=_datetime(data.get("expiration"), _join(path, "expiration")),
            next_chunk_index=_int(
                data.get("next_chunk_index"), _join(path, "next_chunk_index")
            ),
            next_chunk_internal_link=_str(
                data.get("next_chunk_internal_link"),
                _join(path, "next_chunk_internal_link"),
            ),
            http_headers=_str_map(data.get("http_headers"), _join(path, "http_headers")),
        )


def _row(value: Any, path: str) -> List[Optional[str]]:
    return _list(value, path, lambda cell, _: cell) or []


@dataclass(frozen=True)
class ResultData:
    """
    Result data from a statement execution or a single result chunk.

    ``data_array`` is populated for INLINE results in JSON_ARRAY format;
    ``external_links`` for the EXTERNAL_LINKS disposition.
    """

    data_array: Optional[List[List[Optional[str]]]] = None
    external_links: Optional[List[ExternalLink]] = None
    chunk_index: Optional[int] = None
    row_offset: Optional[int] = None
    row_count: Optional[int] = None
    byte_count: Optional[int] = None
    next_chunk_index: Optional[int] = None
    next_chunk_internal_link: Optional[str] = None
    attachment: Optional[bytes] = None

    @classmethod
    def from_dict(cls, data: Any, path: str = "result") -> "ResultData":
        data = _expect_mapping(data, path)
        return cls(
            data_array=_list(data.get("data_array"), _join(path, "data_array"), _row),
            external_links=_list(
                data.get("external_links"),
                _join(path, "external_links"),
                ExternalLink.from_dict,
            ),
            chunk_index=_int(data.get("chunk_index"), _join(path, "chunk_index")),
            row_offset=_int(data.get("row_offset"), _join(path, "row_offset")),
            row_count=_int(data.get("row_count"), _join(path, "row_count")),
            byte_count=_int(data.get("byte_count"), _join(path, "byte_count")),
            next_chunk_index=_int(
                data.get("next_chunk_index"), _join(path, "next_chunk_index")
            ),
            next_chunk_internal_link=_str(
                data.get("next_chunk_internal_link"),
                _join(path, "next_chunk_internal_link"),
            ),
            attachment=_base64(data.get("attachment"), _join(path, "attachment")),
        )


@dataclass(frozen=True)
class ResultManifest:
    """Manifest information for a result set."""

    format: Format
    total_chunk_count: int
    total_row_count: int
    truncated: bool = False
    schema: Optional[ResultSchema] = None
    chunks: List[ChunkInfo] = field(default_factory=list)
    total_byte_count: Optional[int] = None

    @property
    def column_names(self) -> List[str]:
        if self.schema is None:
            return []
        return [column.name for column in self.schema.columns]

    @classmethod
    def from_dict(cls, data: Any, path: str = "manifest") -> "ResultManifest":
        data = _expect_mapping(data, path)
        schema = None
        if data.get("schema") is not None:
            schema = ResultSchema.from_dict(data["schema"], _join(path, "schema"))
        truncated = _bool(data.get("truncated"), _join(path, "truncated"))
        return cls(
            format=_enum(Format, _require(data, "format", path), _join(path, "format")),
            total_chunk_count=_int(
                _require(data, "total_chunk_count", path),
                _join(path, "total_chunk_count"),
            ),
            total_row_count=_int(
                _require(data, "total_row_count", path), _join(path, "total_row_count")
            ),
            truncated=bool(truncated),
            schema=schema,
            chunks=_list(data.get("chunks"), _join(path, "chunks"), ChunkInfo.from_dict)
            or [],
            total_byte_count=_int(
                data.get("total_byte_count"), _join(path, "total_byte_count")
            ),
        )
