"""
Enumerations for string-valued fields of the Databricks REST API.

The API models these fields as plain strings and may add new values at any
time. Every enum here therefore carries an ``UNKNOWN`` member: decoding an
unrecognised value yields ``UNKNOWN`` instead of failing the whole response.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class _ApiEnum(str, Enum):
    """Base for API enums; unrecognised values map to ``UNKNOWN``."""

    @classmethod
    def _missing_(cls, value):
        logger.debug("Unrecognised %s value %r, using UNKNOWN", cls.__name__, value)
        return cls.UNKNOWN  # type: ignore[attr-defined]

    def __str__(self):
        return self.value


class Disposition(_ApiEnum):
    """Where statement results are delivered."""

    INLINE = "INLINE"
    EXTERNAL_LINKS = "EXTERNAL_LINKS"
    UNKNOWN = "UNKNOWN"


class Format(_ApiEnum):
    """Serialization format of statement results."""

    JSON_ARRAY = "JSON_ARRAY"
    ARROW_STREAM = "ARROW_STREAM"
    CSV = "CSV"
    UNKNOWN = "UNKNOWN"


class OnWaitTimeout(_ApiEnum):
    """What the server does with a statement still running when wait_timeout elapses."""

    CONTINUE = "CONTINUE"
    CANCEL = "CANCEL"
    UNKNOWN = "UNKNOWN"


class StatementState(_ApiEnum):
    """
    Execution state of a SQL statement.

    Attributes:
        PENDING: Waiting for warehouse capacity
        RUNNING: Executing
        SUCCEEDED: Finished; results are available
        FAILED: Finished with an error, see ``StatementStatus.error``
        CANCELED: Canceled by the user or by ``on_wait_timeout=CANCEL``
        CLOSED: Results are no longer available
        UNKNOWN: A state this client does not recognise
    """

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"
    CLOSED = "CLOSED"
    UNKNOWN = "UNKNOWN"

    @property
    def is_terminal(self) -> bool:
        """True once the statement can no longer change state."""
        return self in (
            StatementState.SUCCEEDED,
            StatementState.FAILED,
            StatementState.CANCELED,
            StatementState.CLOSED,
        )


class ClusterState(_ApiEnum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    RESTARTING = "RESTARTING"
    RESIZING = "RESIZING"
    TERMINATING = "TERMINATING"
    TERMINATED = "TERMINATED"
    ERROR = "ERROR"
    UNKNOWN = "UNKNOWN"
