"""
Models for the Clusters API.

``ClusterInfo`` is a read-only snapshot of ``GET /api/2.0/clusters/get``. Only
``cluster_id`` is required; the API omits most other fields depending on the
cluster's cloud, access mode and lifecycle state.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from databricks.rest.models.base import (
    _bool,
    _enum,
    _expect_mapping,
    _float,
    _int,
    _join,
    _require,
    _str,
    _str_map,
)
from databricks.rest.types import ClusterState


@dataclass(frozen=True)
class AutoScale:
    min_workers: Optional[int] = None
    max_workers: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "AutoScale":
        data = _expect_mapping(data, path)
        return cls(
            min_workers=_int(data.get("min_workers"), _join(path, "min_workers")),
            max_workers=_int(data.get("max_workers"), _join(path, "max_workers")),
        )


@dataclass(frozen=True)
class AzureAttributes:
    first_on_demand: Optional[int] = None
    availability: Optional[str] = None
    spot_bid_max_price: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "AzureAttributes":
        data = _expect_mapping(data, path)
        return cls(
            first_on_demand=_int(data.get("first_on_demand"), _join(path, "first_on_demand")),
            availability=_str(data.get("availability"), _join(path, "availability")),
            spot_bid_max_price=_float(
                data.get("spot_bid_max_price"), _join(path, "spot_bid_max_price")
            ),
        )


@dataclass(frozen=True)
class InstanceSource:
    node_type_id: Optional[str] = None
    instance_pool_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "InstanceSource":
        data = _expect_mapping(data, path)
        return cls(
            node_type_id=_str(data.get("node_type_id"), _join(path, "node_type_id")),
            instance_pool_id=_str(
                data.get("instance_pool_id"), _join(path, "instance_pool_id")
            ),
        )


@dataclass(frozen=True)
class TerminationReason:
    code: Optional[str] = None
    type: Optional[str] = None
    parameters: Optional[Dict[str, str]] = None

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "TerminationReason":
        data = _expect_mapping(data, path)
        return cls(
            code=_str(data.get("code"), _join(path, "code")),
            type=_str(data.get("type"), _join(path, "type")),
            parameters=_str_map(data.get("parameters"), _join(path, "parameters")),
        )


def _nested(data: Dict[str, Any], key: str, path: str, model):
    value = data.get(key)
    if value is None:
        return None
    return model.from_dict(value, _join(path, key))


@dataclass(frozen=True)
class ClusterSpec:
    """The cluster configuration as last requested by the user."""

    cluster_name: Optional[str] = None
    spark_version: Optional[str] = None
    node_type_id: Optional[str] = None
    driver_node_type_id: Optional[str] = None
    num_workers: Optional[int] = None
    autoscale: Optional[AutoScale] = None
    spark_conf: Optional[Dict[str, str]] = None
    custom_tags: Optional[Dict[str, str]] = None
    azure_attributes: Optional[AzureAttributes] = None
    autotermination_minutes: Optional[int] = None
    enable_elastic_disk: Optional[bool] = None
    enable_local_disk_encryption: Optional[bool] = None
    single_user_name: Optional[str] = None
    data_security_mode: Optional[str] = None
    runtime_engine: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, path: str = "spec") -> "ClusterSpec":
        data = _expect_mapping(data, path)
        p = lambda key: _join(path, key)  # noqa: E731
        return cls(
            cluster_name=_str(data.get("cluster_name"), p("cluster_name")),
            spark_version=_str(data.get("spark_version"), p("spark_version")),
            node_type_id=_str(data.get("node_type_id"), p("node_type_id")),
            driver_node_type_id=_str(
                data.get("driver_node_type_id"), p("driver_node_type_id")
            ),
            num_workers=_int(data.get("num_workers"), p("num_workers")),
            autoscale=_nested(data, "autoscale", path, AutoScale),
            spark_conf=_str_map(data.get("spark_conf"), p("spark_conf")),
            custom_tags=_str_map(data.get("custom_tags"), p("custom_tags")),
            azure_attributes=_nested(data, "azure_attributes", path, AzureAttributes),
            autotermination_minutes=_int(
                data.get("autotermination_minutes"), p("autotermination_minutes")
            ),
            enable_elastic_disk=_bool(
                data.get("enable_elastic_disk"), p("enable_elastic_disk")
            ),
            enable_local_disk_encryption=_bool(
                data.get("enable_local_disk_encryption"),
                p("enable_local_disk_encryption"),
            ),
            single_user_name=_str(data.get("single_user_name"), p("single_user_name")),
            data_security_mode=_str(
                data.get("data_security_mode"), p("data_security_mode")
            ),
            runtime_engine=_str(data.get("runtime_engine"), p("runtime_engine")),
        )


@dataclass(frozen=True)
class ClusterInfo:
    """Snapshot of a cluster's identity, configuration and runtime state."""

    cluster_id: str
    cluster_name: Optional[str] = None
    creator_user_name: Optional[str] = None
    spark_context_id: Optional[int] = None
    # configuration
    spark_version: Optional[str] = None
    effective_spark_version: Optional[str] = None
    node_type_id: Optional[str] = None
    driver_node_type_id: Optional[str] = None
    num_workers: Optional[int] = None
    autoscale: Optional[AutoScale] = None
    spark_conf: Optional[Dict[str, str]] = None
    custom_tags: Optional[Dict[str, str]] = None
    default_tags: Optional[Dict[str, str]] = None
    azure_attributes: Optional[AzureAttributes] = None
    instance_source: Optional[InstanceSource] = None
    driver_instance_source: Optional[InstanceSource] = None
    disk_spec: Optional[Dict[str, Any]] = None
    autotermination_minutes: Optional[int] = None
    enable_elastic_disk: Optional[bool] = None
    enable_local_disk_encryption: Optional[bool] = None
    single_user_name: Optional[str] = None
    data_security_mode: Optional[str] = None
    runtime_engine: Optional[str] = None
    cluster_source: Optional[str] = None
    init_scripts_safe_mode: Optional[bool] = None
    spec: Optional[ClusterSpec] = None
    # runtime
    state: Optional[ClusterState] = None
    state_message: Optional[str] = None
    driver_healthy: Optional[bool] = None
    cluster_memory_mb: Optional[int] = None
    cluster_cores: Optional[float] = None
    start_time: Optional[int] = None
    terminated_time: Optional[int] = None
    last_state_loss_time: Optional[int] = None
    last_activity_time: Optional[int] = None
    last_restarted_time: Optional[int] = None
    termination_reason: Optional[TerminationReason] = None
    pinned_by_user_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ClusterInfo":
        data = _expect_mapping(data, "")
        disk_spec = data.get("disk_spec")
        if disk_spec is not None:
            disk_spec = dict(_expect_mapping(disk_spec, "disk_spec"))
        return cls(
            cluster_id=_str(_require(data, "cluster_id", ""), "cluster_id"),
            cluster_name=_str(data.get("cluster_name"), "cluster_name"),
            creator_user_name=_str(data.get("creator_user_name"), "creator_user_name"),
            spark_context_id=_int(data.get("spark_context_id"), "spark_context_id"),
            spark_version=_str(data.get("spark_version"), "spark_version"),
            effective_spark_version=_str(
                data.get("effective_spark_version"), "effective_spark_version"
            ),
            node_type_id=_str(data.get("node_type_id"), "node_type_id"),
            driver_node_type_id=_str(
                data.get("driver_node_type_id"), "driver_node_type_id"
            ),
            num_workers=_int(data.get("num_workers"), "num_workers"),
            autoscale=_nested(data, "autoscale", "", AutoScale),
            spark_conf=_str_map(data.get("spark_conf"), "spark_conf"),
            custom_tags=_str_map(data.get("custom_tags"), "custom_tags"),
            default_tags=_str_map(data.get("default_tags"), "default_tags"),
            azure_attributes=_nested(data, "azure_attributes", "", AzureAttributes),
            instance_source=_nested(data, "instance_source", "", InstanceSource),
            driver_instance_source=_nested(
                data, "driver_instance_source", "", InstanceSource
            ),
            disk_spec=disk_spec,
            autotermination_minutes=_int(
                data.get("autotermination_minutes"), "autotermination_minutes"
            ),
            enable_elastic_disk=_bool(data.get("enable_elastic_disk"), "enable_elastic_disk"),
            enable_local_disk_encryption=_bool(
                data.get("enable_local_disk_encryption"), "enable_local_disk_encryption"
            ),
            single_user_name=_str(data.get("single_user_name"), "single_user_name"),
            data_security_mode=_str(data.get("data_security_mode"), "data_security_mode"),
            runtime_engine=_str(data.get("runtime_engine"), "runtime_engine"),
            cluster_source=_str(data.get("cluster_source"), "cluster_source"),
            init_scripts_safe_mode=_bool(
                data.get("init_scripts_safe_mode"), "init_scripts_safe_mode"
            ),
            spec=_nested(data, "spec", "", ClusterSpec),
            state=_enum(ClusterState, data.get("state"), "state"),
            state_message=_str(data.get("state_message"), "state_message"),
            driver_healthy=_bool(data.get("driver_healthy"), "driver_healthy"),
            cluster_memory_mb=_int(data.get("cluster_memory_mb"), "cluster_memory_mb"),
            cluster_cores=_float(data.get("cluster_cores"), "cluster_cores"),
            start_time=_int(data.get("start_time"), "start_time"),
            terminated_time=_int(data.get("terminated_time"), "terminated_time"),
            last_state_loss_time=_int(
                data.get("last_state_loss_time"), "last_state_loss_time"
            ),
            last_activity_time=_int(data.get("last_activity_time"), "last_activity_time"),
            last_restarted_time=_int(
                data.get("last_restarted_time"), "last_restarted_time"
            ),
            termination_reason=_nested(data, "termination_reason", "", TerminationReason),
            pinned_by_user_name=_str(
                data.get("pinned_by_user_name"), "pinned_by_user_name"
            ),
        )

    def __str__(self):
        lines: List[str] = ["Cluster Information:"]

        def add(label: str, value: Any, indent: int = 2) -> None:
            if value is not None:
                lines.append(f"{' ' * indent}{label}: {value}")

        def add_map(label: str, values: Optional[Dict[str, Any]], indent: int = 2) -> None:
            if values:
                lines.append(f"{' ' * indent}{label}:")
                for key, value in values.items():
                    lines.append(f"{' ' * (indent + 2)}{key}: {value}")

        add("ID", self.cluster_id)
        add("Name", self.cluster_name)
        add("State", self.state)
        add("State Message", self.state_message)
        add("Created by", self.creator_user_name)
        add("Spark Version", self.spark_version)
        add("Effective Spark Version", self.effective_spark_version)
        add("Node Type ID", self.node_type_id)
        add("Driver Node Type ID", self.driver_node_type_id)
        add("Number of Workers", self.num_workers)
        if self.autoscale is not None:
            add(
                "Autoscale",
                f"{self.autoscale.min_workers}-{self.autoscale.max_workers} workers",
            )
        add("Cluster Memory (MB)", self.cluster_memory_mb)
        add("Cluster Cores", self.cluster_cores)
        add("Autotermination Minutes", self.autotermination_minutes)
        add("Data Security Mode", self.data_security_mode)
        add("Runtime Engine", self.runtime_engine)
        add("Single User Name", self.single_user_name)
        add_map("Spark Configuration", self.spark_conf)
        add_map("Custom Tags", self.custom_tags)
        add("Start Time", self.start_time)
        add("Terminated Time", self.terminated_time)
        add("Last Activity Time", self.last_activity_time)
        if self.termination_reason is not None:
            lines.append("  Termination Reason:")
            add("Code", self.termination_reason.code, indent=4)
            add("Type", self.termination_reason.type, indent=4)
            add_map("Parameters", self.termination_reason.parameters, indent=4)
        return "\n".join(lines)
