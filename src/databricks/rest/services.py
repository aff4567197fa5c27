"""
One-shot service functions.

Each function takes the workspace host and token explicitly, opens a
short-lived ``DatabricksSession``, performs a single request and closes the
session again. Prefer a long-lived ``DatabricksSession`` when issuing many
calls, so connections are reused.
"""

from databricks.rest.config import Config
from databricks.rest.models import (
    ClusterInfo,
    ExecuteStatementRequest,
    JobRunRequest,
    JobRunResponse,
    ResultData,
    StatementResponse,
)
from databricks.rest.session import DatabricksSession


async def execute_sql_statement(
    host: str, token: str, request: ExecuteStatementRequest, **session_kwargs
) -> StatementResponse:
    async with DatabricksSession(Config(host, token), **session_kwargs) as session:
        return await session.execute_sql_statement(request)


async def get_sql_statement_status(
    host: str, token: str, statement_id: str, **session_kwargs
) -> StatementResponse:
    async with DatabricksSession(Config(host, token), **session_kwargs) as session:
        return await session.get_sql_statement_status(statement_id)


async def get_sql_statement_result_chunk(
    host: str, token: str, statement_id: str, chunk_index: int, **session_kwargs
) -> ResultData:
    async with DatabricksSession(Config(host, token), **session_kwargs) as session:
        return await session.get_sql_statement_result_chunk(statement_id, chunk_index)


async def cancel_sql_statement(
    host: str, token: str, statement_id: str, **session_kwargs
) -> None:
    async with DatabricksSession(Config(host, token), **session_kwargs) as session:
        await session.cancel_sql_statement(statement_id)


async def get_cluster_info(
    host: str, token: str, cluster_id: str, **session_kwargs
) -> ClusterInfo:
    async with DatabricksSession(Config(host, token), **session_kwargs) as session:
        return await session.get_cluster_info(cluster_id)


async def execute_job_run(
    host: str, token: str, request: JobRunRequest, **session_kwargs
) -> JobRunResponse:
    async with DatabricksSession(Config(host, token), **session_kwargs) as session:
        return await session.execute_job_run(request)
