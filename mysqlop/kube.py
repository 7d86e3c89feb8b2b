"""Plain models of the Kubernetes objects the operator produces."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class ObjectKey:
    """Identifies an object by name and namespace."""

    name: str
    namespace: str = ""

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class OwnerReference:
    api_version: str
    kind: str
    name: str
    uid: str = ""
    controller: bool = True
    block_owner_deletion: bool = True


@dataclass
class ObjectMeta:
    name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)
    uid: str = ""
    owner_references: List[OwnerReference] = field(default_factory=list)


@dataclass
class ResourceRequirements:
    limits: Optional[Dict[str, str]] = None
    requests: Optional[Dict[str, str]] = None


@dataclass
class EnvVar:
    name: str
    value: str = ""


@dataclass
class ContainerPort:
    name: str
    container_port: int


@dataclass
class VolumeMount:
    name: str
    mount_path: str


@dataclass(frozen=True)
class Volume:
    """A pod volume with exactly one source."""

    name: str
    empty_dir: bool = False
    host_path: Optional[str] = None
    config_map: Optional[str] = None
    nfs_server: Optional[str] = None
    nfs_path: str = "/"

    def __post_init__(self) -> None:
        sources = (
            self.empty_dir,
            self.host_path is not None,
            self.config_map is not None,
            self.nfs_server is not None,
        )
        if sum(sources) != 1:
            raise ValueError(f"volume {self.name!r} must have exactly one source")

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name}
        if self.empty_dir:
            result["emptyDir"] = {}
        elif self.host_path is not None:
            result["hostPath"] = {"path": self.host_path}
        elif self.config_map is not None:
            result["configMap"] = {"name": self.config_map}
        else:
            result["nfs"] = {"server": self.nfs_server, "path": self.nfs_path}
        return result


@dataclass
class ExecAction:
    command: List[str]


@dataclass
class HTTPGetAction:
    path: str
    port: int


@dataclass
class Probe:
    handler: Union[ExecAction, HTTPGetAction]
    initial_delay_seconds: int = 0
    timeout_seconds: int = 1
    period_seconds: int = 10
    success_threshold: int = 1
    failure_threshold: int = 3

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.handler, ExecAction):
            result: Dict[str, Any] = {"exec": {"command": list(self.handler.command)}}
        else:
            result = {"httpGet": {"path": self.handler.path, "port": self.handler.port}}
        result.update(
            initialDelaySeconds=self.initial_delay_seconds,
            timeoutSeconds=self.timeout_seconds,
            periodSeconds=self.period_seconds,
            successThreshold=self.success_threshold,
            failureThreshold=self.failure_threshold,
        )
        return result


def _resources_dict(resources: ResourceRequirements) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    if resources.limits is not None:
        result["limits"] = dict(resources.limits)
    if resources.requests is not None:
        result["requests"] = dict(resources.requests)
    return result


def _meta_dict(meta: ObjectMeta) -> Dict[str, Any]:
    result: Dict[str, Any] = {"name": meta.name}
    if meta.namespace:
        result["namespace"] = meta.namespace
    if meta.labels:
        result["labels"] = dict(meta.labels)
    if meta.annotations:
        result["annotations"] = dict(meta.annotations)
    if meta.owner_references:
        result["ownerReferences"] = [
            {
                "apiVersion": ref.api_version,
                "kind": ref.kind,
                "name": ref.name,
                "uid": ref.uid,
                "controller": ref.controller,
                "blockOwnerDeletion": ref.block_owner_deletion,
            }
            for ref in meta.owner_references
        ]
    return result


@dataclass
class Container:
    name: str
    image: str
    image_pull_policy: str = ""
    command: Optional[List[str]] = None
    env: Optional[List[EnvVar]] = None
    lifecycle: Optional[Dict[str, Any]] = None
    resources: ResourceRequirements = field(default_factory=ResourceRequirements)
    ports: Optional[List[ContainerPort]] = None
    liveness_probe: Optional[Probe] = None
    readiness_probe: Optional[Probe] = None
    volume_mounts: Optional[List[VolumeMount]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name, "image": self.image}
        if self.image_pull_policy:
            result["imagePullPolicy"] = self.image_pull_policy
        if self.command is not None:
            result["command"] = list(self.command)
        if self.env is not None:
            result["env"] = [{"name": var.name, "value": var.value} for var in self.env]
        if self.lifecycle is not None:
            result["lifecycle"] = dict(self.lifecycle)
        result["resources"] = _resources_dict(self.resources)
        if self.ports is not None:
            result["ports"] = [
                {"name": port.name, "containerPort": port.container_port}
                for port in self.ports
            ]
        if self.liveness_probe is not None:
            result["livenessProbe"] = self.liveness_probe.to_dict()
        if self.readiness_probe is not None:
            result["readinessProbe"] = self.readiness_probe.to_dict()
        if self.volume_mounts is not None:
            result["volumeMounts"] = [
                {"name": mount.name, "mountPath": mount.mount_path}
                for mount in self.volume_mounts
            ]
        return result


@dataclass
class PersistentVolumeClaim:
    metadata: ObjectMeta
    access_modes: Optional[List[str]] = None
    resources: ResourceRequirements = field(default_factory=ResourceRequirements)
    storage_class_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        spec: Dict[str, Any] = {"resources": _resources_dict(self.resources)}
        if self.access_modes is not None:
            spec["accessModes"] = list(self.access_modes)
        if self.storage_class_name is not None:
            spec["storageClassName"] = self.storage_class_name
        return {
            "apiVersion": "v1",
            "kind": "PersistentVolumeClaim",
            "metadata": _meta_dict(self.metadata),
            "spec": spec,
        }