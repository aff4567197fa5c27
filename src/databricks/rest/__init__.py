__version__ = "0.1.0"
USER_AGENT_NAME = "PyDatabricksRestClient"

from databricks.rest.exc import *  # noqa: E402,F401,F403
from databricks.rest.config import Config  # noqa: E402
from databricks.rest.types import (  # noqa: E402
    ClusterState,
    Disposition,
    Format,
    OnWaitTimeout,
    StatementState,
)
from databricks.rest.models import (  # noqa: E402
    ClusterInfo,
    ExecuteStatementRequest,
    JobRunRequest,
    JobRunResponse,
    QueueSettings,
    ResultData,
    StatementParameter,
    StatementResponse,
)
from databricks.rest.session import DatabricksSession  # noqa: E402


def connect(config=None, **kwargs) -> DatabricksSession:
    """Open a session, reading the configuration from the environment when none is given."""
    return DatabricksSession(config if config is not None else Config.from_env(), **kwargs)
