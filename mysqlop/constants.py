"""Names, ports, paths and version tables shared by the cluster model."""

from enum import Enum
from types import MappingProxyType


class ResourceName(str, Enum):
    """Kinds of resources whose names derive from the cluster name."""

    STATEFUL_SET = "StatefulSet"
    CONFIG_MAP = "ConfigMap"
    HEADLESS_SVC = "HeadlessSVC"
    POD_DISRUPTION_BUDGET = "PodDisruptionBudget"
    LEADER_SERVICE = "LeaderService"
    FOLLOWER_SERVICE = "FollowerService"
    METRICS_SERVICE = "MetricsService"
    SECRET = "Secret"
    XENON_META_DATA = "XenonMetaData"


CLUSTER_API_VERSION = "mysql.radondb.com/v1alpha1"
CLUSTER_KIND = "MysqlCluster"

# Reserved MySQL accounts managed by the operator.
REPLICATION_USER = "radondb_repl"
OPERATOR_USER = "radondb_operator"
METRICS_USER = "radondb_metrics"

INVALID_MYSQL_VERSION = "0.0.0"
MYSQL_DEFAULT_VERSION = "5.7.34"
MYSQL_TAGS_TO_SEMVER = MappingProxyType({"5.7": "5.7.34", "8.0": "8.0.25"})
MYSQL_IMAGE_VERSIONS = MappingProxyType(
    {
        "5.7.34": "percona/percona-server:5.7.34",
        "8.0.25": "percona/percona-server:8.0.25",
    }
)

MYSQL_PORT = 3306
MYSQL_PORT_NAME = "mysql"
XENON_PORT = 8801
XENON_PORT_NAME = "xenon"

CONTAINER_MYSQL_NAME = "mysql"
CONTAINER_XENON_NAME = "xenon"
CONTAINER_SLOWLOG_NAME = "slowlog"
CONTAINER_AUDITLOG_NAME = "auditlog"

DATA_VOLUME_NAME = "data"
DATA_VOLUME_MOUNT_PATH = "/var/lib/mysql"
MYSQL_CONF_VOLUME_NAME = "mysql-conf"
MYSQL_CONF_VOLUME_MOUNT_PATH = "/etc/mysql"
LOGS_VOLUME_NAME = "logs"
LOGS_VOLUME_MOUNT_PATH = "/var/log/mysql"
MYSQL_CM_VOLUME_NAME = "mysql-cnf"
MYSQL_CM_VOLUME_MOUNT_PATH = "/mnt/mysql-cm"
XENON_CM_VOLUME_NAME = "xenon-cnf"
XENON_CM_VOLUME_MOUNT_PATH = "/mnt/xenon-cm"
XENON_META_VOLUME_NAME = "xenon-meta"
XENON_META_VOLUME_MOUNT_PATH = "/var/lib/xenon"
SCRIPTS_VOLUME_NAME = "scripts"
SCRIPTS_VOLUME_MOUNT_PATH = "/scripts"
XENON_CONF_VOLUME_NAME = "xenon-conf"
XENON_CONF_VOLUME_MOUNT_PATH = "/etc/xenon"
INIT_FILE_VOLUME_NAME = "init-mysql"
INIT_FILE_VOLUME_MOUNT_PATH = "/docker-entrypoint-initdb.d"
SYS_VOLUME_NAME = "host-sys"
SYS_VOLUME_MOUNT_PATH = "/host-sys"
SYS_VOLUME_HOST_PATH = "/sys/kernel/mm/transparent_hugepage"
SYS_LOCAL_TIME_ZONE = "host-localtime"
SYS_LOCAL_TIME_ZONE_HOST_PATH = "/etc/localtime"
SYS_LOCAL_TIME_ZONE_MOUNT_PATH = "/etc/localtime"
XTRABACKUP_PV = "backup"
XTRABACKUP_LOCAL = "/backup"

CONF_CLIENT_PATH = "/etc/mysql/client.conf"