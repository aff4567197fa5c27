import logging
from typing import Any, Callable, Dict, Optional, TypeVar, Union
from urllib.parse import quote

import httpx

from databricks.rest.config import Config
from databricks.rest.http_client import (
    DEFAULT_POOL_MAX_IDLE_PER_HOST,
    DEFAULT_TIMEOUT_SECONDS,
    DatabricksHttpClient,
    HttpMethod,
)
from databricks.rest.models import (
    ClusterInfo,
    ExecuteStatementRequest,
    JobRunRequest,
    JobRunResponse,
    ResultData,
    StatementResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DatabricksSession:
    """
    A reusable handle for calling the Databricks REST API.

    A session owns one ``Config`` and one ``DatabricksHttpClient`` and reuses
    them for every call. Each operation is a single request/response exchange:
    nothing is retried, polled or cached. Operations may run concurrently on
    the same session.

    Use it as an async context manager, or call ``close()`` when done::

        async with DatabricksSession(Config.from_env()) as session:
            response = await session.execute_sql_statement(request)
    """

    # API paths
    STATEMENT_PATH = "/api/2.0/sql/statements"
    STATEMENT_PATH_WITH_ID = STATEMENT_PATH + "/{}"
    CANCEL_STATEMENT_PATH_WITH_ID = STATEMENT_PATH + "/{}/cancel"
    CHUNK_PATH_WITH_ID_AND_INDEX = STATEMENT_PATH + "/{}/result/chunks/{}"
    CLUSTER_GET_PATH = "/api/2.0/clusters/get"
    JOB_RUN_NOW_PATH = "/api/2.1/jobs/run-now"

    def __init__(
        self,
        config: Config,
        pool_max_idle_per_host: int = DEFAULT_POOL_MAX_IDLE_PER_HOST,
        verify: Union[bool, str] = True,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Create a session and its shared HTTP client.

        Args:
            config: Workspace host and token
            pool_max_idle_per_host: Maximum number of idle connections kept per host
            verify: TLS verification flag or path to a CA bundle
            timeout: Default HTTP timeout in seconds
            transport: Optional httpx transport, mainly for tests

        Raises:
            TransportError: If the HTTP client cannot be constructed
        """
        self.config = config
        self._http_client = DatabricksHttpClient(
            config,
            pool_max_idle_per_host=pool_max_idle_per_host,
            verify=verify,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def with_active_pools(
        cls, pool_max_idle_per_host: int, config: Config, **kwargs
    ) -> "DatabricksSession":
        """Create a session with a custom number of idle connections per host."""
        return cls(config, pool_max_idle_per_host=pool_max_idle_per_host, **kwargs)

    @classmethod
    def with_unverified_ssl(cls, config: Config, **kwargs) -> "DatabricksSession":
        """
        Create a session that skips TLS certificate verification.

        Only meant for development setups with self-signed certificates.
        """
        logger.warning(
            "TLS certificate verification is disabled for host %s", config.base_url
        )
        return cls(config, verify=False, **kwargs)

    async def close(self):
        await self._http_client.close()

    async def __aenter__(self) -> "DatabricksSession":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.close()

    async def execute_sql_statement(
        self, request: ExecuteStatementRequest
    ) -> StatementResponse:
        """
        Submit a SQL statement for execution on a SQL warehouse.

        ``wait_timeout`` and ``on_wait_timeout`` are forwarded to the server
        unchanged; the client itself never waits for a terminal state.

        Args:
            request: The statement and its execution options

        Returns:
            StatementResponse: The statement handle and whatever status and
            results the server returned within its wait window
        """
        logger.debug(
            "DatabricksSession.execute_sql_statement(warehouse_id=%s)",
            request.warehouse_id,
        )
        return await self._send(
            HttpMethod.POST,
            self.STATEMENT_PATH,
            StatementResponse.from_dict,
            data=request.to_dict(),
        )

    async def get_sql_statement_status(self, statement_id: str) -> StatementResponse:
        """
        Fetch the current status (and inline results, if any) of a statement.

        Call it again to poll; this method does not loop.
        """
        return await self._send(
            HttpMethod.GET,
            self.STATEMENT_PATH_WITH_ID.format(_quote(statement_id)),
            StatementResponse.from_dict,
        )

    async def get_sql_statement_result_chunk(
        self, statement_id: str, chunk_index: int
    ) -> ResultData:
        """Fetch one chunk of a statement's result set by index."""
        return await self._send(
            HttpMethod.GET,
            self.CHUNK_PATH_WITH_ID_AND_INDEX.format(
                _quote(statement_id), int(chunk_index)
            ),
            lambda data: ResultData.from_dict(data, ""),
        )

    async def cancel_sql_statement(self, statement_id: str) -> None:
        """Request cancellation of a running statement. The server acts asynchronously."""
        await self._http_client.request(
            HttpMethod.POST,
            self.CANCEL_STATEMENT_PATH_WITH_ID.format(_quote(statement_id)),
        )

    async def get_cluster_info(self, cluster_id: str) -> ClusterInfo:
        """Fetch a read-only snapshot of a cluster's configuration and state."""
        return await self._send(
            HttpMethod.GET,
            self.CLUSTER_GET_PATH,
            ClusterInfo.from_dict,
            params={"cluster_id": cluster_id},
        )

    async def execute_job_run(self, request: JobRunRequest) -> JobRunResponse:
        """Trigger a run of an existing job and return the new run's id."""
        return await self._send(
            HttpMethod.POST,
            self.JOB_RUN_NOW_PATH,
            JobRunResponse.from_dict,
            data=request.to_dict(),
        )

    async def _send(
        self,
        method: HttpMethod,
        path: str,
        decode: Callable[[Dict[str, Any]], T],
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> T:
        payload = await self._http_client.request(method, path, data=data, params=params)
        return decode(payload)


def _quote(identifier: str) -> str:
    return quote(str(identifier), safe="")
