"""
Request models for the Databricks REST client.

These models define the JSON bodies sent by the client. ``to_dict`` never
emits a key whose value is ``None``: an unset optional field is omitted so the
server applies its own default.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from databricks.rest.exc import SerializationError
from databricks.rest.types import Disposition, Format, OnWaitTimeout


def _wire_value(value: Any) -> Any:
    """Enum members go out as their string value; raw strings pass through verbatim."""
    if isinstance(value, Enum):
        return value.value
    return value


def _require_present(request: Any, *names: str) -> None:
    for name in names:
        if getattr(request, name) is None:
            raise SerializationError(
                f"{type(request).__name__}.{name} is required", field=name
            )


@dataclass(frozen=True)
class StatementParameter:
    """Representation of a named parameter for a SQL statement."""

    name: str
    value: Optional[str] = None
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name}
        if self.value is not None:
            result["value"] = self.value
        if self.type is not None:
            result["type"] = self.type
        return result


@dataclass(frozen=True)
class ExecuteStatementRequest:
    """Representation of a request to execute a SQL statement."""

    statement: str
    warehouse_id: str
    catalog: Optional[str] = None
    schema: Optional[str] = None
    parameters: Optional[List[StatementParameter]] = None
    row_limit: Optional[int] = None
    byte_limit: Optional[int] = None
    disposition: Optional[Union[Disposition, str]] = None
    format: Optional[Union[Format, str]] = None
    wait_timeout: Optional[str] = None
    on_wait_timeout: Optional[Union[OnWaitTimeout, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the request to a dictionary for JSON serialization."""
        _require_present(self, "statement", "warehouse_id")

        result: Dict[str, Any] = {
            "statement": self.statement,
            "warehouse_id": self.warehouse_id,
        }

        optional = {
            "catalog": self.catalog,
            "schema": self.schema,
            "row_limit": self.row_limit,
            "byte_limit": self.byte_limit,
            "disposition": _wire_value(self.disposition),
            "format": _wire_value(self.format),
            "wait_timeout": self.wait_timeout,
            "on_wait_timeout": _wire_value(self.on_wait_timeout),
        }
        result.update({k: v for k, v in optional.items() if v is not None})

        if self.parameters is not None:
            result["parameters"] = [param.to_dict() for param in self.parameters]

        return result


@dataclass(frozen=True)
class QueueSettings:
    enabled: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled}


@dataclass(frozen=True)
class JobRunRequest:
    """Representation of a request to trigger a run of an existing job."""

    job_id: int
    idempotency_token: Optional[str] = None
    queue: Optional[QueueSettings] = None
    jar_params: Optional[List[str]] = None
    notebook_params: Optional[Dict[str, str]] = None
    python_params: Optional[List[str]] = None
    spark_submit_params: Optional[List[str]] = None
    python_named_params: Optional[Dict[str, str]] = None
    pipeline_params: Optional[Dict[str, bool]] = None
    sql_params: Optional[Dict[str, str]] = None
    dbt_commands: Optional[List[str]] = None
    job_parameters: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the request to a dictionary for JSON serialization."""
        _require_present(self, "job_id")

        result: Dict[str, Any] = {"job_id": self.job_id}

        if self.queue is not None:
            result["queue"] = self.queue.to_dict()

        optional = {
            "idempotency_token": self.idempotency_token,
            "jar_params": self.jar_params,
            "notebook_params": self.notebook_params,
            "python_params": self.python_params,
            "spark_submit_params": self.spark_submit_params,
            "python_named_params": self.python_named_params,
            "pipeline_params": self.pipeline_params,
            "sql_params": self.sql_params,
            "dbt_commands": self.dbt_commands,
            "job_parameters": self.job_parameters,
        }
        result.update({k: v for k, v in optional.items() if v is not None})

        return result
