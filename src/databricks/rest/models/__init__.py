"""
Models for the Databricks REST client.

This package contains the request and response records for the SQL
Statement Execution, Clusters and Jobs APIs.
"""

from databricks.rest.models.base import (
    ServiceError,
    StatementStatus,
    ColumnInfo,
    ResultSchema,
    ChunkInfo,
    ExternalLink,
    ResultData,
    ResultManifest,
)

from databricks.rest.models.requests import (
    StatementParameter,
    ExecuteStatementRequest,
    QueueSettings,
    JobRunRequest,
)

from databricks.rest.models.responses import (
    StatementResponse,
    JobRunResponse,
)

from databricks.rest.models.clusters import (
    AutoScale,
    AzureAttributes,
    InstanceSource,
    TerminationReason,
    ClusterSpec,
    ClusterInfo,
)

__all__ = [
    # Base models
    "ServiceError",
    "StatementStatus",
    "ColumnInfo",
    "ResultSchema",
    "ChunkInfo",
    "ExternalLink",
    "ResultData",
    "ResultManifest",
    # Request models
    "StatementParameter",
    "ExecuteStatementRequest",
    "QueueSettings",
    "JobRunRequest",
    # Response models
    "StatementResponse",
    "JobRunResponse",
    # Cluster models
    "AutoScale",
    "AzureAttributes",
    "InstanceSource",
    "TerminationReason",
    "ClusterSpec",
    "ClusterInfo",
]
