"""Builders for the containers that make up a MySQL cluster pod."""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from . import constants as c
from .cluster import MysqlCluster, get_prefix_from_env
from .kube import (
    Container,
    ContainerPort,
    EnvVar,
    ExecAction,
    Probe,
    ResourceRequirements,
    VolumeMount,
)

_SLEEP_FOREVER = "/var/lib/mysql/sleep-forever"


class ContainerBuilder:
    """Builds one container of the cluster pod.

    The defaults describe a container that runs the sidecar image with the
    pod's extra resources and nothing else; subclasses override what differs.
    """

    def __init__(self, cluster: MysqlCluster, name: str):
        self.cluster = cluster
        self.name = name

    def image(self) -> str:
        return self.cluster.spec.pod_policy.sidecar_image

    def command(self) -> Optional[List[str]]:
        return None

    def env(self) -> Optional[List[EnvVar]]:
        return None

    def resources(self) -> ResourceRequirements:
        return self.cluster.spec.pod_policy.extra_resources

    def ports(self) -> Optional[List[ContainerPort]]:
        return None

    def liveness_probe(self) -> Optional[Probe]:
        return None

    def readiness_probe(self) -> Optional[Probe]:
        return None

    def volume_mounts(self) -> Optional[List[VolumeMount]]:
        return None

    def build(self) -> Container:
        """Assemble the container, prefixing the image with IMAGE_PREFIX."""
        return Container(
            name=self.name,
            image=f"{get_prefix_from_env()}{self.image()}",
            image_pull_policy=self.cluster.spec.pod_policy.image_pull_policy,
            command=self.command(),
            env=self.env(),
            lifecycle=None,
            resources=self.resources(),
            ports=self.ports(),
            liveness_probe=self.liveness_probe(),
            readiness_probe=self.readiness_probe(),
            volume_mounts=self.volume_mounts(),
        )


class MysqlContainer(ContainerBuilder):
    """The MySQL server itself."""

    def image(self) -> str:
        return c.MYSQL_IMAGE_VERSIONS.get(self.cluster.get_mysql_version(), "")

    def command(self) -> List[str]:
        return [
            "sh",
            "-c",
            f"while  [ -f '{_SLEEP_FOREVER}' ] ;do sleep 2 ; done; "
            "/docker-entrypoint.sh mysqld",
        ]

    def env(self) -> Optional[List[EnvVar]]:
        if self.cluster.spec.mysql_opts.init_tokudb:
            return [EnvVar(name="INIT_TOKUDB", value="1")]
        return None

    def resources(self) -> ResourceRequirements:
        return self.cluster.spec.mysql_opts.resources

    def ports(self) -> List[ContainerPort]:
        return [ContainerPort(name=c.MYSQL_PORT_NAME, container_port=c.MYSQL_PORT)]

    def liveness_probe(self) -> Probe:
        # The sleep-forever file keeps the container alive for maintenance.
        return Probe(
            handler=ExecAction(
                command=[
                    "sh",
                    "-c",
                    f"if [ -f '{_SLEEP_FOREVER}' ] ;then exit 0 ; fi; pgrep mysqld",
                ]
            ),
            initial_delay_seconds=30,
            timeout_seconds=5,
            period_seconds=10,
            success_threshold=1,
            failure_threshold=3,
        )

    def readiness_probe(self) -> Probe:
        return Probe(
            handler=ExecAction(
                command=[
                    "sh",
                    "-c",
                    f"if [ -f '{_SLEEP_FOREVER}' ] ;then exit 0 ; fi; "
                    f'test $(mysql --defaults-file={c.CONF_CLIENT_PATH} -NB -e "SELECT 1") -eq 1',
                ]
            ),
            initial_delay_seconds=10,
            timeout_seconds=1,
            period_seconds=10,
            success_threshold=1,
            failure_threshold=3,
        )

    def volume_mounts(self) -> List[VolumeMount]:
        return [
            VolumeMount(c.MYSQL_CONF_VOLUME_NAME, c.MYSQL_CONF_VOLUME_MOUNT_PATH),
            VolumeMount(c.DATA_VOLUME_NAME, c.DATA_VOLUME_MOUNT_PATH),
            VolumeMount(c.LOGS_VOLUME_NAME, c.LOGS_VOLUME_MOUNT_PATH),
            VolumeMount(c.SYS_LOCAL_TIME_ZONE, c.SYS_LOCAL_TIME_ZONE_MOUNT_PATH),
        ]


class XenonContainer(ContainerBuilder):
    """The xenon high-availability agent."""

    def image(self) -> str:
        return self.cluster.spec.xenon_opts.image

    def resources(self) -> ResourceRequirements:
        return self.cluster.spec.xenon_opts.resources

    def ports(self) -> List[ContainerPort]:
        return [ContainerPort(name=c.XENON_PORT_NAME, container_port=c.XENON_PORT)]

    def liveness_probe(self) -> Probe:
        return Probe(
            handler=ExecAction(command=["sh", "-c", "pgrep xenon && xenoncli xenon ping"]),
            initial_delay_seconds=30,
            timeout_seconds=5,
            period_seconds=10,
            success_threshold=1,
            failure_threshold=3,
        )

    def readiness_probe(self) -> Probe:
        return Probe(
            handler=ExecAction(command=["sh", "-c", "xenoncli xenon ping"]),
            initial_delay_seconds=10,
            timeout_seconds=1,
            period_seconds=10,
            success_threshold=1,
            failure_threshold=3,
        )

    def volume_mounts(self) -> List[VolumeMount]:
        return [
            VolumeMount(c.SCRIPTS_VOLUME_NAME, c.SCRIPTS_VOLUME_MOUNT_PATH),
            VolumeMount(c.XENON_CONF_VOLUME_NAME, c.XENON_CONF_VOLUME_MOUNT_PATH),
            VolumeMount(c.XENON_META_VOLUME_NAME, c.XENON_META_VOLUME_MOUNT_PATH),
            VolumeMount(c.SYS_LOCAL_TIME_ZONE, c.SYS_LOCAL_TIME_ZONE_MOUNT_PATH),
        ]


class SlowLogContainer(ContainerBuilder):
    """Streams the MySQL slow query log."""

    def command(self) -> List[str]:
        return ["tail", "-f", c.LOGS_VOLUME_MOUNT_PATH + "/mysql-slow.log"]

    def volume_mounts(self) -> List[VolumeMount]:
        return [VolumeMount(c.LOGS_VOLUME_NAME, c.LOGS_VOLUME_MOUNT_PATH)]


class AuditLogContainer(ContainerBuilder):
    """Streams the MySQL audit log."""

    def image(self) -> str:
        return self.cluster.spec.pod_policy.busybox_image

    def command(self) -> List[str]:
        return ["tail", "-f", c.LOGS_VOLUME_MOUNT_PATH + "/mysql-audit.log"]

    def volume_mounts(self) -> List[VolumeMount]:
        return [VolumeMount(c.LOGS_VOLUME_NAME, c.LOGS_VOLUME_MOUNT_PATH)]


_BUILDERS: Dict[str, Type[ContainerBuilder]] = {
    c.CONTAINER_MYSQL_NAME: MysqlContainer,
    c.CONTAINER_XENON_NAME: XenonContainer,
    c.CONTAINER_SLOWLOG_NAME: SlowLogContainer,
    c.CONTAINER_AUDITLOG_NAME: AuditLogContainer,
}


def ensure_container(name: str, cluster: MysqlCluster) -> Container:
    """Build the container called ``name`` for ``cluster``."""
    try:
        builder = _BUILDERS[name]
    except KeyError:
        raise ValueError(f"unknown container name: {name!r}") from None
    return builder(cluster, name).build()