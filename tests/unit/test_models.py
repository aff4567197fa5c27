"""
Tests for the request and response models.

These cover JSON encoding of requests, decoding of responses (including the
rules for optional, unknown and malformed fields) and the enum fallbacks.
"""

import base64
from datetime import datetime, timezone

import pytest

from databricks.rest.exc import SerializationError
from databricks.rest.models import (
    ClusterInfo,
    ExecuteStatementRequest,
    JobRunRequest,
    JobRunResponse,
    QueueSettings,
    ResultData,
    StatementParameter,
    StatementResponse,
)
from databricks.rest.types import (
    ClusterState,
    Disposition,
    Format,
    OnWaitTimeout,
    StatementState,
)


@pytest.fixture
def succeeded_statement():
    return {
        "statement_id": "01ed-stmt",
        "status": {"state": "SUCCEEDED"},
        "manifest": {
            "format": "JSON_ARRAY",
            "schema": {
                "column_count": 2,
                "columns": [
                    {"name": "id", "type_name": "LONG", "type_text": "BIGINT", "position": 0},
                    {"name": "label", "type_name": "STRING", "position": 1},
                ],
            },
            "total_chunk_count": 1,
            "total_row_count": 2,
            "truncated": False,
            "chunks": [{"chunk_index": 0, "row_offset": 0, "row_count": 2}],
        },
        "result": {
            "chunk_index": 0,
            "row_offset": 0,
            "row_count": 2,
            "data_array": [["0", "zero"], ["1", None]],
        },
        "some_future_field": {"ignored": True},
    }


class TestExecuteStatementRequest:
    def test_only_required_fields(self):
        request = ExecuteStatementRequest(statement="SELECT 1", warehouse_id="abc123")

        assert request.to_dict() == {"statement": "SELECT 1", "warehouse_id": "abc123"}

    def test_all_fields(self):
        request = ExecuteStatementRequest(
            statement="SELECT * FROM t WHERE id = :id",
            warehouse_id="abc123",
            catalog="main",
            schema="default",
            parameters=[
                StatementParameter(name="id", value="7", type="INT"),
                StatementParameter(name="nothing"),
            ],
            row_limit=100,
            byte_limit=1024,
            disposition=Disposition.EXTERNAL_LINKS,
            format=Format.ARROW_STREAM,
            wait_timeout="10s",
            on_wait_timeout=OnWaitTimeout.CANCEL,
        )

        assert request.to_dict() == {
            "statement": "SELECT * FROM t WHERE id = :id",
            "warehouse_id": "abc123",
            "catalog": "main",
            "schema": "default",
            "parameters": [
                {"name": "id", "value": "7", "type": "INT"},
                {"name": "nothing"},
            ],
            "row_limit": 100,
            "byte_limit": 1024,
            "disposition": "EXTERNAL_LINKS",
            "format": "ARROW_STREAM",
            "wait_timeout": "10s",
            "on_wait_timeout": "CANCEL",
        }

    def test_parameters_keep_their_order(self):
        names = ["c", "a", "b"]
        request = ExecuteStatementRequest(
            statement="SELECT 1",
            warehouse_id="w",
            parameters=[StatementParameter(name=n, value=n) for n in names],
        )

        assert [p["name"] for p in request.to_dict()["parameters"]] == names

    def test_raw_strings_pass_through(self):
        request = ExecuteStatementRequest(
            statement="SELECT 1",
            warehouse_id="w",
            disposition="INLINE_OR_EXTERNAL_LINKS",
            format="JSON_ARRAY",
        )

        body = request.to_dict()
        assert body["disposition"] == "INLINE_OR_EXTERNAL_LINKS"
        assert body["format"] == "JSON_ARRAY"

    @pytest.mark.parametrize("field_name", ["statement", "warehouse_id"])
    def test_missing_required_field(self, field_name):
        kwargs = {"statement": "SELECT 1", "warehouse_id": "w", field_name: None}

        with pytest.raises(SerializationError) as excinfo:
            ExecuteStatementRequest(**kwargs).to_dict()
        assert excinfo.value.field == field_name


class TestStatementResponse:
    def test_from_dict(self, succeeded_statement):
        response = StatementResponse.from_dict(succeeded_statement)

        assert response.statement_id == "01ed-stmt"
        assert response.status.state == StatementState.SUCCEEDED
        assert response.status.error is None
        assert response.manifest.format == Format.JSON_ARRAY
        assert response.manifest.total_row_count == 2
        assert response.manifest.total_byte_count is None
        assert response.manifest.column_names == ["id", "label"]
        assert response.manifest.schema.columns[0].type_text == "BIGINT"
        assert response.manifest.schema.columns[1].type_text is None
        assert response.manifest.chunks[0].row_count == 2
        assert response.result.data_array == [["0", "zero"], ["1", None]]
        assert response.result.external_links is None

    def test_records(self, succeeded_statement):
        response = StatementResponse.from_dict(succeeded_statement)

        assert response.records() == [
            {"id": "0", "label": "zero"},
            {"id": "1", "label": None},
        ]

    def test_records_without_schema(self):
        response = StatementResponse.from_dict(
            {
                "statement_id": "s",
                "status": {"state": "SUCCEEDED"},
                "manifest": {"format": "JSON_ARRAY", "total_chunk_count": 1, "total_row_count": 1},
                "result": {"data_array": [["0"]]},
            }
        )

        with pytest.raises(SerializationError) as excinfo:
            response.records()
        assert excinfo.value.field == "manifest.schema"

    def test_records_row_width_mismatch(self, succeeded_statement):
        succeeded_statement["result"]["data_array"] = [["0", "zero"], ["1"]]
        response = StatementResponse.from_dict(succeeded_statement)

        with pytest.raises(SerializationError) as excinfo:
            response.records()
        assert excinfo.value.field == "result.data_array[1]"

    def test_omitted_optional_fields_stay_absent(self):
        response = StatementResponse.from_dict(
            {"statement_id": "s", "status": {"state": "PENDING"}}
        )

        assert response.manifest is None
        assert response.result is None
        assert response.status.error is None
        assert response.status.sql_state is None
        assert response.records() == []

    def test_failed_status_carries_error(self):
        response = StatementResponse.from_dict(
            {
                "statement_id": "s",
                "status": {
                    "state": "FAILED",
                    "sql_state": "42P01",
                    "error": {
                        "error_code": "BAD_REQUEST",
                        "message": "[TABLE_OR_VIEW_NOT_FOUND] missing_table",
                    },
                },
            }
        )

        assert response.status.state == StatementState.FAILED
        assert response.status.state.is_terminal
        assert response.status.sql_state == "42P01"
        assert response.status.error.error_code == "BAD_REQUEST"
        assert "missing_table" in response.status.error.message

    def test_unknown_state_decodes_to_unknown(self):
        response = StatementResponse.from_dict(
            {"statement_id": "s", "status": {"state": "QUEUED_FOR_FUTURE"}}
        )

        assert response.status.state == StatementState.UNKNOWN
        assert not response.status.state.is_terminal

    def test_external_links(self):
        response = StatementResponse.from_dict(
            {
                "statement_id": "s",
                "status": {"state": "SUCCEEDED"},
                "manifest": {
                    "format": "ARROW_STREAM",
                    "total_chunk_count": 2,
                    "total_row_count": 10,
                    "total_byte_count": 4096,
                },
                "result": {
                    "external_links": [
                        {
                            "chunk_index": 0,
                            "row_offset": 0,
                            "row_count": 5,
                            "byte_count": 2048,
                            "next_chunk_index": 1,
                            "next_chunk_internal_link": "/api/2.0/sql/statements/s/result/chunks/1",
                            "external_link": "https://storage.example.com/chunk0",
                            "expiration": "2024-01-01T12:00:00.000Z",
                            "http_headers": {"x-ms-blob-type": "BlockBlob"},
                        }
                    ]
                },
            }
        )

        link = response.result.external_links[0]
        assert response.manifest.total_byte_count == 4096
        assert response.result.data_array is None
        assert link.external_link == "https://storage.example.com/chunk0"
        assert link.next_chunk_index == 1
        assert link.expiration == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert link.http_headers == {"x-ms-blob-type": "BlockBlob"}

    def test_expiration_without_offset_is_utc(self):
        chunk = ResultData.from_dict(
            {
                "external_links": [
                    {
                        "chunk_index": 0,
                        "row_offset": 0,
                        "row_count": 1,
                        "external_link": "https://x",
                        "expiration": "2024-01-01T12:00:00",
                    }
                ]
            },
            "",
        )

        expiration = chunk.external_links[0].expiration
        assert expiration.tzinfo is not None
        assert expiration == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_http_headers_must_be_strings(self):
        with pytest.raises(SerializationError) as excinfo:
            ResultData.from_dict(
                {
                    "external_links": [
                        {
                            "chunk_index": 0,
                            "row_offset": 0,
                            "row_count": 1,
                            "external_link": "https://x",
                            "http_headers": {"x-ms-blob-type": None},
                        }
                    ]
                },
                "",
            )
        assert excinfo.value.field == "external_links[0].http_headers.x-ms-blob-type"

    @pytest.mark.parametrize(
        "body,field",
        [
            ({"status": {"state": "SUCCEEDED"}}, "statement_id"),
            ({"statement_id": "s"}, "status"),
            ({"statement_id": "s", "status": {}}, "status.state"),
            ({"statement_id": "s", "status": "SUCCEEDED"}, "status"),
            ({"statement_id": 42, "status": {"state": "SUCCEEDED"}}, "statement_id"),
            (
                {
                    "statement_id": "s",
                    "status": {"state": "SUCCEEDED"},
                    "manifest": {"format": "CSV", "total_chunk_count": 1},
                },
                "manifest.total_row_count",
            ),
            (
                {
                    "statement_id": "s",
                    "status": {"state": "SUCCEEDED"},
                    "result": {"data_array": "not-a-list"},
                },
                "result.data_array",
            ),
            (
                {
                    "statement_id": "s",
                    "status": {"state": "SUCCEEDED"},
                    "result": {
                        "external_links": [
                            {
                                "chunk_index": 0,
                                "row_offset": 0,
                                "row_count": 1,
                                "external_link": "https://x",
                                "expiration": "yesterday-ish",
                            }
                        ]
                    },
                },
                "result.external_links[0].expiration",
            ),
        ],
    )
    def test_malformed_body_names_the_field(self, body, field):
        with pytest.raises(SerializationError) as excinfo:
            StatementResponse.from_dict(body)
        assert excinfo.value.field == field

    def test_non_object_body(self):
        with pytest.raises(SerializationError):
            StatementResponse.from_dict(["not", "an", "object"])


class TestResultData:
    def test_chunk_with_attachment(self):
        payload = base64.b64encode(b"arrow-bytes").decode("ascii")

        chunk = ResultData.from_dict(
            {"chunk_index": 3, "row_offset": 300, "row_count": 100, "attachment": payload},
            "",
        )

        assert chunk.chunk_index == 3
        assert chunk.row_offset == 300
        assert chunk.attachment == b"arrow-bytes"

    def test_int64_fields_sent_as_strings(self):
        chunk = ResultData.from_dict({"row_count": "100", "byte_count": "2048"}, "")

        assert chunk.row_count == 100
        assert chunk.byte_count == 2048

    @pytest.mark.parametrize("value", [1.9, 2.0, "2.5", "ten", "", True, [1], {"n": 1}])
    def test_non_integer_values_rejected(self, value):
        with pytest.raises(SerializationError) as excinfo:
            ResultData.from_dict({"row_count": value}, "")
        assert excinfo.value.field == "row_count"

    def test_fractional_manifest_counts_rejected(self):
        with pytest.raises(SerializationError) as excinfo:
            StatementResponse.from_dict(
                {
                    "statement_id": "s",
                    "status": {"state": "SUCCEEDED"},
                    "manifest": {
                        "format": "JSON_ARRAY",
                        "total_chunk_count": 1.9,
                        "total_row_count": 2.5,
                    },
                }
            )
        assert excinfo.value.field == "manifest.total_chunk_count"

    def test_invalid_attachment(self):
        with pytest.raises(SerializationError) as excinfo:
            ResultData.from_dict({"attachment": "***"}, "")
        assert excinfo.value.field == "attachment"


class TestEnums:
    @pytest.mark.parametrize(
        "enum_cls", [Disposition, Format, OnWaitTimeout, StatementState, ClusterState]
    )
    def test_unknown_value_falls_back(self, enum_cls):
        assert enum_cls("SOMETHING_NEW") is enum_cls.UNKNOWN

    def test_known_values(self):
        assert Disposition("INLINE") is Disposition.INLINE
        assert Format("CSV") is Format.CSV
        assert StatementState("CANCELED") is StatementState.CANCELED
        assert str(StatementState.RUNNING) == "RUNNING"

    @pytest.mark.parametrize(
        "state,terminal",
        [
            (StatementState.PENDING, False),
            (StatementState.RUNNING, False),
            (StatementState.SUCCEEDED, True),
            (StatementState.FAILED, True),
            (StatementState.CANCELED, True),
            (StatementState.CLOSED, True),
        ],
    )
    def test_is_terminal(self, state, terminal):
        assert state.is_terminal is terminal


class TestClusterInfo:
    @pytest.fixture
    def cluster_payload(self):
        return {
            "cluster_id": "0123-456789-abcdef",
            "cluster_name": "shared-autoscaling",
            "creator_user_name": "someone@example.com",
            "spark_context_id": 4020997813441462000,
            "spark_version": "14.3.x-scala2.12",
            "node_type_id": "Standard_DS3_v2",
            "driver_node_type_id": "Standard_DS3_v2",
            "autoscale": {"min_workers": 2, "max_workers": 8},
            "spark_conf": {"spark.speculation": "true"},
            "azure_attributes": {
                "first_on_demand": 1,
                "availability": "ON_DEMAND_AZURE",
                "spot_bid_max_price": -1.0,
            },
            "autotermination_minutes": 120,
            "enable_elastic_disk": True,
            "state": "RUNNING",
            "state_message": "",
            "start_time": 1700000000000,
            "cluster_memory_mb": 43008,
            "cluster_cores": 12.0,
            "default_tags": {"Vendor": "Databricks"},
            "termination_reason": {
                "code": "INACTIVITY",
                "type": "SUCCESS",
                "parameters": {"inactivity_duration_min": "120"},
            },
            "spec": {"cluster_name": "shared-autoscaling", "num_workers": 0},
            "brand_new_field": [1, 2, 3],
        }

    def test_from_dict(self, cluster_payload):
        info = ClusterInfo.from_dict(cluster_payload)

        assert info.cluster_id == "0123-456789-abcdef"
        assert info.state == ClusterState.RUNNING
        assert info.autoscale.min_workers == 2
        assert info.autoscale.max_workers == 8
        assert info.azure_attributes.spot_bid_max_price == -1.0
        assert info.cluster_cores == 12.0
        assert info.termination_reason.parameters == {"inactivity_duration_min": "120"}
        assert info.spec.num_workers == 0
        assert info.num_workers is None
        assert info.single_user_name is None

    def test_minimal_payload(self):
        info = ClusterInfo.from_dict({"cluster_id": "c-1"})

        assert info.cluster_id == "c-1"
        assert info.state is None
        assert info.autoscale is None

    def test_unknown_state(self):
        info = ClusterInfo.from_dict({"cluster_id": "c-1", "state": "HIBERNATING"})
        assert info.state == ClusterState.UNKNOWN

    def test_missing_cluster_id(self):
        with pytest.raises(SerializationError) as excinfo:
            ClusterInfo.from_dict({"cluster_name": "x"})
        assert excinfo.value.field == "cluster_id"

    def test_wrong_nested_type(self, cluster_payload):
        cluster_payload["autoscale"] = {"min_workers": "lots"}

        with pytest.raises(SerializationError) as excinfo:
            ClusterInfo.from_dict(cluster_payload)
        assert excinfo.value.field == "autoscale.min_workers"

    @pytest.mark.parametrize(
        "key,mapping,field",
        [
            ("spark_conf", {"a": None}, "spark_conf.a"),
            ("spark_conf", {"b": {"x": 1}}, "spark_conf.b"),
            ("custom_tags", {"c": 3}, "custom_tags.c"),
            ("default_tags", {"Vendor": True}, "default_tags.Vendor"),
        ],
    )
    def test_string_maps_reject_non_string_values(self, cluster_payload, key, mapping, field):
        cluster_payload[key] = mapping

        with pytest.raises(SerializationError) as excinfo:
            ClusterInfo.from_dict(cluster_payload)
        assert excinfo.value.field == field

    def test_termination_parameters_must_be_strings(self, cluster_payload):
        cluster_payload["termination_reason"]["parameters"] = {"inactivity_duration_min": 120}

        with pytest.raises(SerializationError) as excinfo:
            ClusterInfo.from_dict(cluster_payload)
        assert excinfo.value.field == "termination_reason.parameters.inactivity_duration_min"

    def test_str(self, cluster_payload):
        text = str(ClusterInfo.from_dict(cluster_payload))

        assert text.startswith("Cluster Information:")
        assert "  ID: 0123-456789-abcdef" in text
        assert "  State: RUNNING" in text
        assert "  Autoscale: 2-8 workers" in text
        assert "    Code: INACTIVITY" in text
        assert "Single User Name" not in text


class TestJobRun:
    def test_request_to_dict(self):
        request = JobRunRequest(
            job_id=42,
            idempotency_token="run-once",
            queue=QueueSettings(enabled=True),
            job_parameters={"env": "dev"},
        )

        assert request.to_dict() == {
            "job_id": 42,
            "idempotency_token": "run-once",
            "queue": {"enabled": True},
            "job_parameters": {"env": "dev"},
        }

    def test_response_from_dict(self):
        response = JobRunResponse.from_dict({"run_id": 455644833, "number_in_job": 455644833})

        assert response.run_id == 455644833
        assert response.number_in_job == 455644833

    def test_response_without_run_id(self):
        with pytest.raises(SerializationError):
            JobRunResponse.from_dict({"number_in_job": 1})
