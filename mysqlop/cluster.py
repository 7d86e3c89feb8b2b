"""Derived settings and manifests for a MySQL cluster."""

from __future__ import annotations

import logging
import math
import os
import re
from typing import Dict, List, Union

from . import constants as c
from .constants import ResourceName
from .kube import (
    ObjectKey,
    ObjectMeta,
    OwnerReference,
    PersistentVolumeClaim,
    ResourceRequirements,
    Volume,
)
from .quantity import parse_quantity, quantity_milli_value, quantity_value
from .spec import ClusterSpec, MysqlClusterResource

KB = 1 << 10
MB = 1 << 20
GB = 1 << 30
_UINT64_MAX = (1 << 64) - 1

_DIGITS = re.compile(r"[0-9]+")

_RESOURCE_SUFFIXES = {
    ResourceName.STATEFUL_SET: "-mysql",
    ResourceName.CONFIG_MAP: "-mysql",
    ResourceName.HEADLESS_SVC: "-mysql",
    ResourceName.POD_DISRUPTION_BUDGET: "-mysql",
    ResourceName.LEADER_SERVICE: "-leader",
    ResourceName.FOLLOWER_SERVICE: "-follower",
    ResourceName.METRICS_SERVICE: "-metrics",
    ResourceName.SECRET: "-secret",
    ResourceName.XENON_META_DATA: "-xenon",
}

_UNITS = {"K": KB, "M": MB, "G": GB}


class ValidationError(ValueError):
    """Raised when a cluster specification is not acceptable."""


def _parse_uint(text: str) -> int:
    if not _DIGITS.fullmatch(text):
        raise ValueError(f"invalid unsigned integer: {text!r}")
    value = int(text)
    if value > _UINT64_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return value


def size_to_bytes(text: str) -> int:
    """Parse a size such as ``512M`` (units K, M, G, base 1024) into bytes."""
    s = text.strip().upper()
    index = next((i for i, ch in enumerate(s) if ch.isalpha()), None)
    if index is None:
        return _parse_uint(s)
    nums = _parse_uint(s[:index])
    unit = _UNITS.get(s[index:])
    if unit is None:
        raise ValueError(
            f"'{s}' format error, must be a positive integer "
            "with a unit of measurement like K, M or G"
        )
    return nums * unit


def is_cluster_kind(kind: str) -> bool:
    """Tell whether ``kind`` names the MysqlCluster resource."""
    return kind in ("MysqlCluster", "mysqlcluster", "mysqlclusters")


def get_prefix_from_env() -> str:
    """Return the image registry prefix from IMAGE_PREFIX, with a trailing slash."""
    prefix = os.environ.get("IMAGE_PREFIX", "")
    return f"{prefix}/" if prefix else ""


class MysqlCluster:
    """Wraps a MysqlCluster resource with the logic that derives from it."""

    def __init__(self, resource: MysqlClusterResource):
        self.resource = resource
        self._log = logging.getLogger("mysqlcluster")

    @property
    def name(self) -> str:
        return self.resource.metadata.name

    @property
    def namespace(self) -> str:
        return self.resource.metadata.namespace

    @property
    def spec(self) -> ClusterSpec:
        return self.resource.spec

    def unwrap(self) -> MysqlClusterResource:
        return self.resource

    def validate(self) -> None:
        opts = self.spec.mysql_opts
        reserved = ("root", c.REPLICATION_USER, c.OPERATOR_USER, c.METRICS_USER)
        if opts.user in reserved:
            raise ValidationError(
                f"spec.mysqlOpts.user cannot be root|{c.REPLICATION_USER}"
                f"|{c.OPERATOR_USER}|{c.METRICS_USER}"
            )
        if self.spec.mysql_version == "8.0" and opts.init_tokudb:
            self._log.info(
                "TokuDB is not supported in MySQL 8.0 any more, the value in "
                "Cluster.spec.mysqlOpts.initTokuDB should be set false"
            )
            return
        if opts.root_host == "127.0.0.1":
            raise ValidationError("spec.mysqlOpts.rootHost cannot be 127.0.0.1")

    def get_labels(self) -> Dict[str, str]:
        annotations = self.resource.metadata.annotations
        labels = {
            "mysql.radondb.com/cluster": self.name,
            "app.kubernetes.io/name": "mysql",
            "app.kubernetes.io/instance": annotations.get(
                "app.kubernetes.io/instance", self.name
            ),
            "app.kubernetes.io/component": annotations.get(
                "app.kubernetes.io/component", "database"
            ),
            "app.kubernetes.io/managed-by": "mysql.radondb.com",
        }
        if "app.kubernetes.io/part-of" in annotations:
            labels["app.kubernetes.io/part-of"] = annotations["app.kubernetes.io/part-of"]
        return labels

    def get_selector_labels(self) -> Dict[str, str]:
        return {
            "mysql.radondb.com/cluster": self.name,
            "app.kubernetes.io/name": "mysql",
            "app.kubernetes.io/managed-by": "mysql.radondb.com",
        }

    def get_mysql_version(self) -> str:
        version = c.MYSQL_TAGS_TO_SEMVER.get(self.spec.mysql_version)
        if version is None:
            self._log.error(
                "Invalid mysql version option:%s: currently we do not support mysql 5.6 "
                "or earlier version, default mysql version option should be 5.7 or 8.0",
                self.spec.mysql_version,
            )
            return c.INVALID_MYSQL_VERSION
        if version not in c.MYSQL_IMAGE_VERSIONS:
            version = c.MYSQL_DEFAULT_VERSION
        return version

    def create_peers(self) -> str:
        """Return the comma separated xenon peer addresses."""
        return ",".join(
            f"{self.get_pod_host_name(i)}:{c.XENON_PORT}"
            for i in range(self.spec.replicas)
        )

    def get_pod_host_name(self, index: int) -> str:
        return (
            f"{self.get_name_for_resource(ResourceName.STATEFUL_SET)}-{index}."
            f"{self.get_name_for_resource(ResourceName.HEADLESS_SVC)}.{self.namespace}"
        )

    def ensure_volumes(self) -> List[Volume]:
        volumes: List[Volume] = []
        if not self.spec.persistence.enabled:
            volumes.append(Volume(name=c.DATA_VOLUME_NAME, empty_dir=True))
        if self.spec.mysql_opts.init_tokudb:
            volumes.append(Volume(name=c.SYS_VOLUME_NAME, host_path=c.SYS_VOLUME_HOST_PATH))
        volumes += [
            Volume(name=c.MYSQL_CONF_VOLUME_NAME, empty_dir=True),
            Volume(name=c.LOGS_VOLUME_NAME, empty_dir=True),
            Volume(
                name=c.MYSQL_CM_VOLUME_NAME,
                config_map=self.get_name_for_resource(ResourceName.CONFIG_MAP),
            ),
            Volume(
                name=c.XENON_CM_VOLUME_NAME,
                config_map=self.get_name_for_resource(ResourceName.XENON_META_DATA),
            ),
            Volume(name=c.XENON_META_VOLUME_NAME, empty_dir=True),
            Volume(name=c.SCRIPTS_VOLUME_NAME, empty_dir=True),
            Volume(name=c.XENON_CONF_VOLUME_NAME, empty_dir=True),
            Volume(name=c.INIT_FILE_VOLUME_NAME, empty_dir=True),
            Volume(name=c.SYS_LOCAL_TIME_ZONE, host_path=c.SYS_LOCAL_TIME_ZONE_HOST_PATH),
        ]
        if self.spec.nfs_server_address:
            volumes.append(
                Volume(name=c.XTRABACKUP_PV, nfs_server=self.spec.nfs_server_address, nfs_path="/")
            )
        return volumes

    def ensure_volume_claim_templates(self) -> List[PersistentVolumeClaim]:
        """Return the data volume claim, or nothing when persistence is off."""
        persistence = self.spec.persistence
        if not persistence.enabled:
            return []
        if persistence.storage_class == "-":
            persistence.storage_class = ""
        parse_quantity(persistence.size)
        owner = OwnerReference(
            api_version=self.resource.api_version,
            kind=self.resource.kind,
            name=self.name,
            uid=self.resource.metadata.uid,
        )
        claim = PersistentVolumeClaim(
            metadata=ObjectMeta(
                name=c.DATA_VOLUME_NAME,
                namespace=self.namespace,
                labels=self.get_labels(),
                owner_references=[owner],
            ),
            access_modes=persistence.access_modes,
            resources=ResourceRequirements(requests={"storage": persistence.size}),
            storage_class_name=persistence.storage_class,
        )
        return [claim]

    def get_name_for_resource(self, name: Union[ResourceName, str]) -> str:
        return self.name + _RESOURCE_SUFFIXES.get(name, "")

    def ensure_mysql_conf(self) -> None:
        """Fill in innodb buffer pool size and instances from the resources."""
        opts = self.spec.mysql_opts
        if opts.mysql_conf is None:
            opts.mysql_conf = {}
        requests = opts.resources.requests or {}
        limits = opts.resources.limits or {}
        mem = quantity_value(requests["memory"]) if "memory" in requests else 0
        cpu = quantity_milli_value(limits["cpu"]) if "cpu" in limits else 0

        pool_size = 128 * MB
        if mem <= GB:
            default_size = int(0.45 * mem)
            max_size = int(0.6 * mem)
        else:
            default_size = int(0.6 * mem)
            max_size = int(0.8 * mem)

        conf = opts.mysql_conf.get("innodb_buffer_pool_size")
        if conf is None:
            pool_size = max(default_size, pool_size)
        else:
            try:
                nums = size_to_bytes(conf)
            except ValueError:
                pool_size = max(default_size, pool_size)
            else:
                pool_size = min(max(nums, pool_size), max_size)

        instances = max(min(math.ceil(cpu / 1000), math.floor(pool_size / GB)), 1)
        opts.mysql_conf["innodb_buffer_pool_size"] = str(pool_size)
        opts.mysql_conf["innodb_buffer_pool_instances"] = str(int(instances))

    def get_cluster_key(self) -> ObjectKey:
        return ObjectKey(name=self.name, namespace=self.namespace)

    def get_key(self) -> ObjectKey:
        return ObjectKey(name=self.name, namespace=self.namespace)