"""The MysqlCluster resource and its specification."""

from __future__ import annotations

import copy as _copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .constants import CLUSTER_API_VERSION, CLUSTER_KIND
from .kube import ObjectMeta, ResourceRequirements


@dataclass
class Persistence:
    enabled: bool = False
    access_modes: Optional[List[str]] = None
    storage_class: Optional[str] = None
    size: str = "10Gi"


@dataclass
class MysqlOpts:
    user: str = ""
    root_password: str = ""
    root_host: str = "localhost"
    init_tokudb: bool = False
    mysql_conf: Dict[str, str] = field(default_factory=dict)
    resources: ResourceRequirements = field(default_factory=ResourceRequirements)


@dataclass
class XenonOpts:
    image: str = ""
    admit_defeat_heartbeat_count: int = 5
    election_timeout: int = 10000
    resources: ResourceRequirements = field(default_factory=ResourceRequirements)


@dataclass
class MetricsOpts:
    enabled: bool = False
    image: str = ""
    resources: ResourceRequirements = field(default_factory=ResourceRequirements)


@dataclass
class PodPolicy:
    image_pull_policy: str = "IfNotPresent"
    sidecar_image: str = ""
    busybox_image: str = "busybox"
    extra_resources: ResourceRequirements = field(default_factory=ResourceRequirements)


@dataclass
class ClusterSpec:
    replicas: int = 3
    mysql_version: str = "5.7"
    mysql_opts: MysqlOpts = field(default_factory=MysqlOpts)
    xenon_opts: XenonOpts = field(default_factory=XenonOpts)
    metrics_opts: MetricsOpts = field(default_factory=MetricsOpts)
    pod_policy: PodPolicy = field(default_factory=PodPolicy)
    persistence: Persistence = field(default_factory=Persistence)
    backup_secret_name: str = ""
    restore_from: str = ""
    nfs_server_address: str = ""


@dataclass
class MysqlClusterResource:
    """A MysqlCluster object as stored in the cluster."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ClusterSpec = field(default_factory=ClusterSpec)
    api_version: str = CLUSTER_API_VERSION
    kind: str = CLUSTER_KIND

    def copy(self) -> "MysqlClusterResource":
        """Return an independent deep copy."""
        return _copy.deepcopy(self)