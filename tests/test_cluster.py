import logging

import pytest

from mysqlop import constants as c
from mysqlop.cluster import (
    MysqlCluster,
    ValidationError,
    get_prefix_from_env,
    is_cluster_kind,
    size_to_bytes,
)
from mysqlop.constants import ResourceName
from mysqlop.kube import ObjectKey, ObjectMeta, ResourceRequirements, Volume
from mysqlop.spec import ClusterSpec, MysqlClusterResource, MysqlOpts, Persistence


def make_cluster(namespace="", annotations=None, **spec_kwargs):
    spec_kwargs.setdefault("mysql_version", "5.7")
    resource = MysqlClusterResource(
        metadata=ObjectMeta(name="sample", namespace=namespace, annotations=annotations or {}),
        spec=ClusterSpec(**spec_kwargs),
    )
    return MysqlCluster(resource)


BASE_VOLUMES = [
    Volume(name=c.MYSQL_CONF_VOLUME_NAME, empty_dir=True),
    Volume(name=c.LOGS_VOLUME_NAME, empty_dir=True),
    Volume(name=c.MYSQL_CM_VOLUME_NAME, config_map="sample-mysql"),
    Volume(name=c.XENON_CM_VOLUME_NAME, config_map="sample-xenon"),
    Volume(name=c.XENON_META_VOLUME_NAME, empty_dir=True),
    Volume(name=c.SCRIPTS_VOLUME_NAME, empty_dir=True),
    Volume(name=c.XENON_CONF_VOLUME_NAME, empty_dir=True),
    Volume(name=c.INIT_FILE_VOLUME_NAME, empty_dir=True),
    Volume(name=c.SYS_LOCAL_TIME_ZONE, host_path=c.SYS_LOCAL_TIME_ZONE_HOST_PATH),
]


def test_unwrap_returns_resource():
    cluster = make_cluster()
    assert cluster.unwrap() is cluster.resource
    assert cluster.unwrap().metadata.name == "sample"


@pytest.mark.parametrize(
    "annotations, extra",
    [
        ({"app.kubernetes.io/instance": "instance"}, {"app.kubernetes.io/instance": "instance"}),
        ({"app.kubernetes.io/component": "component"}, {"app.kubernetes.io/component": "component"}),
        ({"app.kubernetes.io/part-of": "part-of"}, {"app.kubernetes.io/part-of": "part-of"}),
    ],
)
def test_get_labels(annotations, extra):
    want = {
        "mysql.radondb.com/cluster": "sample",
        "app.kubernetes.io/name": "mysql",
        "app.kubernetes.io/instance": "sample",
        "app.kubernetes.io/component": "database",
        "app.kubernetes.io/managed-by": "mysql.radondb.com",
    }
    want.update(extra)
    assert make_cluster(annotations=annotations).get_labels() == want


def test_get_selector_labels():
    assert make_cluster().get_selector_labels() == {
        "mysql.radondb.com/cluster": "sample",
        "app.kubernetes.io/name": "mysql",
        "app.kubernetes.io/managed-by": "mysql.radondb.com",
    }


def test_get_mysql_version():
    assert make_cluster(mysql_version="8.0").get_mysql_version() == "8.0.25"
    assert make_cluster(mysql_version="5.7").get_mysql_version() == "5.7.34"


def test_get_mysql_version_invalid(caplog):
    with caplog.at_level(logging.ERROR, logger="mysqlcluster"):
        result = make_cluster(mysql_version="5.7.34").get_mysql_version()
    assert result == c.INVALID_MYSQL_VERSION
    assert "Invalid mysql version option:5.7.34" in caplog.text


def test_create_peers_two_and_three():
    assert make_cluster(namespace="default", replicas=2).create_peers() == (
        "sample-mysql-0.sample-mysql.default:8801,sample-mysql-1.sample-mysql.default:8801"
    )
    assert make_cluster(namespace="default", replicas=3).create_peers() == (
        "sample-mysql-0.sample-mysql.default:8801,sample-mysql-1.sample-mysql.default:8801,"
        "sample-mysql-2.sample-mysql.default:8801"
    )


def test_create_peers_many():
    peers = make_cluster(namespace="default", replicas=666).create_peers().split(",")
    assert len(peers) == 666
    assert peers[0] == "sample-mysql-0.sample-mysql.default:8801"
    assert peers[-1] == "sample-mysql-665.sample-mysql.default:8801"


@pytest.mark.parametrize("replicas", [0, -1])
def test_create_peers_empty(replicas):
    assert make_cluster(namespace="default", replicas=replicas).create_peers() == ""


def test_get_pod_host_name():
    cluster = make_cluster(namespace="default")
    assert cluster.get_pod_host_name(0) == "sample-mysql-0.sample-mysql.default"
    assert cluster.get_pod_host_name(1) == "sample-mysql-1.sample-mysql.default"


def test_ensure_volumes_without_persistence():
    cluster = make_cluster(persistence=Persistence(enabled=False))
    want = [Volume(name=c.DATA_VOLUME_NAME, empty_dir=True)] + BASE_VOLUMES
    assert cluster.ensure_volumes() == want


def test_ensure_volumes_with_tokudb():
    cluster = make_cluster(
        persistence=Persistence(enabled=True), mysql_opts=MysqlOpts(init_tokudb=True)
    )
    want = [Volume(name=c.SYS_VOLUME_NAME, host_path=c.SYS_VOLUME_HOST_PATH)] + BASE_VOLUMES
    assert cluster.ensure_volumes() == want


def test_ensure_volumes_with_persistence():
    assert make_cluster(persistence=Persistence(enabled=True)).ensure_volumes() == BASE_VOLUMES


def test_ensure_volumes_with_nfs():
    cluster = make_cluster(persistence=Persistence(enabled=True), nfs_server_address="10.0.0.5")
    volumes = cluster.ensure_volumes()
    assert volumes[:-1] == BASE_VOLUMES
    assert volumes[-1] == Volume(name=c.XTRABACKUP_PV, nfs_server="10.0.0.5", nfs_path="/")


def test_volume_claims_disabled():
    assert make_cluster().ensure_volume_claim_templates() == []


def test_volume_claims_enabled():
    cluster = make_cluster(
        namespace="default",
        persistence=Persistence(enabled=True, storage_class="ssd", size="10Gi"),
    )
    claims = cluster.ensure_volume_claim_templates()
    assert len(claims) == 1
    claim = claims[0]
    assert claim.metadata.name == "data"
    assert claim.metadata.namespace == "default"
    assert claim.metadata.labels == cluster.get_labels()
    assert claim.access_modes is None
    assert claim.resources == ResourceRequirements(requests={"storage": "10Gi"})
    assert claim.storage_class_name == "ssd"
    owner = claim.metadata.owner_references[0]
    assert (owner.kind, owner.name, owner.controller) == (c.CLUSTER_KIND, "sample", True)


def test_volume_claims_dash_storage_class():
    cluster = make_cluster(persistence=Persistence(enabled=True, storage_class="-", size="10Gi"))
    claims = cluster.ensure_volume_claim_templates()
    assert claims[0].storage_class_name == ""
    assert cluster.spec.persistence.storage_class == ""


def test_volume_claims_invalid_size():
    cluster = make_cluster(persistence=Persistence(enabled=True, size="lots"))
    with pytest.raises(ValueError):
        cluster.ensure_volume_claim_templates()


def test_get_name_for_resource():
    cluster = make_cluster()
    for kind in (ResourceName.STATEFUL_SET, ResourceName.CONFIG_MAP, ResourceName.HEADLESS_SVC):
        assert cluster.get_name_for_resource(kind) == "sample-mysql"
    assert cluster.get_name_for_resource(ResourceName.LEADER_SERVICE) == "sample-leader"
    assert cluster.get_name_for_resource(ResourceName.FOLLOWER_SERVICE) == "sample-follower"
    assert cluster.get_name_for_resource(ResourceName.SECRET) == "sample-secret"
    assert cluster.get_name_for_resource(ResourceName.METRICS_SERVICE) == "sample-metrics"
    assert cluster.get_name_for_resource(ResourceName.XENON_META_DATA) == "sample-xenon"
    assert cluster.get_name_for_resource("others") == "sample"


def conf_cluster(memory, cpu, conf=None):
    return make_cluster(
        mysql_opts=MysqlOpts(
            mysql_conf=dict(conf or {}),
            resources=ResourceRequirements(requests={"memory": memory}, limits={"cpu": cpu}),
        )
    )


def run_conf(cluster):
    cluster.ensure_mysql_conf()
    conf = cluster.spec.mysql_opts.mysql_conf
    return conf["innodb_buffer_pool_size"], conf["innodb_buffer_pool_instances"]


def test_mysql_conf_default_size():
    assert run_conf(conf_cluster("1Gi", "1")) == ("483183820", "1")


def test_mysql_conf_given_size():
    cluster = conf_cluster("1Gi", "1", {"innodb_buffer_pool_size": "629145600"})
    assert run_conf(cluster) == ("629145600", "1")


def test_mysql_conf_size_capped():
    cluster = conf_cluster("2Gi", "1", {"innodb_buffer_pool_size": "1825361100"})
    assert run_conf(cluster) == ("1717986918", "1")


def test_mysql_conf_unparseable_size():
    cluster = conf_cluster("2Gi", "1", {"innodb_buffer_pool_size": "1.7G"})
    assert run_conf(cluster) == ("1288490188", "1")


def test_mysql_conf_instances():
    cluster = conf_cluster("16Gi", "4", {"innodb_buffer_pool_size": "2G"})
    assert run_conf(cluster) == ("2147483648", "2")


def test_size_to_bytes_units():
    assert size_to_bytes("1000k") == 1000 * 1024
    assert size_to_bytes("1000m") == 1000 * (1 << 20)
    assert size_to_bytes("1000g") == 1000 * (1 << 30)
    assert size_to_bytes("1000") == 1000
    assert size_to_bytes(" 2g ") == 2 * (1 << 30)


def test_size_to_bytes_bad_unit():
    with pytest.raises(ValueError) as info:
        size_to_bytes("1000a")
    assert str(info.value) == (
        "'1000A' format error, must be a positive integer with a unit of measurement like K, M or G"
    )


@pytest.mark.parametrize("text", ["", "-5", "+5", "1.5G", "xK"])
def test_size_to_bytes_bad_number(text):
    with pytest.raises(ValueError):
        size_to_bytes(text)


def test_is_cluster_kind():
    assert all(is_cluster_kind(k) for k in ("MysqlCluster", "mysqlcluster", "mysqlclusters"))
    assert not is_cluster_kind("MysqlUser")


def test_prefix_from_env(monkeypatch):
    monkeypatch.delenv("IMAGE_PREFIX", raising=False)
    assert get_prefix_from_env() == ""
    monkeypatch.setenv("IMAGE_PREFIX", "docker.io")
    assert get_prefix_from_env() == "docker.io/"


def test_keys():
    cluster = make_cluster(namespace="default")
    assert cluster.get_key() == ObjectKey(name="sample", namespace="default")
    assert cluster.get_cluster_key() == cluster.get_key()


@pytest.mark.parametrize("user", ["root", c.REPLICATION_USER, c.OPERATOR_USER, c.METRICS_USER])
def test_validate_reserved_user(user):
    with pytest.raises(ValidationError, match="spec.mysqlOpts.user cannot be root"):
        make_cluster(mysql_opts=MysqlOpts(user=user)).validate()


def test_validate_root_host():
    with pytest.raises(ValidationError, match="rootHost cannot be 127.0.0.1"):
        make_cluster(mysql_opts=MysqlOpts(root_host="127.0.0.1")).validate()


def test_validate_tokudb_on_mysql8_returns_early(caplog):
    cluster = make_cluster(
        mysql_version="8.0", mysql_opts=MysqlOpts(init_tokudb=True, root_host="127.0.0.1")
    )
    with caplog.at_level(logging.INFO, logger="mysqlcluster"):
        result = cluster.validate()
    assert result is None
    assert "TokuDB is not supported" in caplog.text