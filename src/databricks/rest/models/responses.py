"""
Response models for the Databricks REST client.

These models define the structures decoded from API responses.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from databricks.rest.exc import SerializationError
from databricks.rest.models.base import (
    ResultData,
    ResultManifest,
    StatementStatus,
    _expect_mapping,
    _int,
    _require,
    _str,
)


@dataclass(frozen=True)
class StatementResponse:
    """
    Representation of a SQL statement execution, as returned by both the
    execute and the get-status endpoints.

    ``statement_id`` is the handle for follow-up status, chunk and cancel calls.
    """

    statement_id: str
    status: StatementStatus
    manifest: Optional[ResultManifest] = None
    result: Optional[ResultData] = None

    @classmethod
    def from_dict(cls, data: Any) -> "StatementResponse":
        """Create a StatementResponse from a dictionary."""
        data = _expect_mapping(data, "")
        manifest = None
        if data.get("manifest") is not None:
            manifest = ResultManifest.from_dict(data["manifest"])
        result = None
        if data.get("result") is not None:
            result = ResultData.from_dict(data["result"])
        return cls(
            statement_id=_str(_require(data, "statement_id", ""), "statement_id"),
            status=StatementStatus.from_dict(_require(data, "status", "")),
            manifest=manifest,
            result=result,
        )

    def records(self) -> List[Dict[str, Any]]:
        """
        Rows of an inline JSON_ARRAY result as dicts keyed by column name.

        Raises:
            SerializationError: If rows are present but the manifest has no
                schema, or a row's width does not match the column count
        """
        if self.result is None or not self.result.data_array:
            return []
        column_names = self.manifest.column_names if self.manifest else []
        if not column_names:
            raise SerializationError(
                "Result rows are present but the manifest has no column schema",
                field="manifest.schema",
            )
        records = []
        for i, row in enumerate(self.result.data_array):
            if len(row) != len(column_names):
                raise SerializationError(
                    f"Row {i} has {len(row)} values for {len(column_names)} columns",
                    field=f"result.data_array[{i}]",
                )
            records.append(dict(zip(column_names, row)))
        return records


@dataclass(frozen=True)
class JobRunResponse:
    """Representation of the response from triggering a job run."""

    run_id: int
    number_in_job: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Any) -> "JobRunResponse":
        data = _expect_mapping(data, "")
        return cls(
            run_id=_int(_require(data, "run_id", ""), "run_id"),
            number_in_job=_int(data.get("number_in_job"), "number_in_job"),
        )
