# mysqlop

`mysqlop` turns a MySQL cluster description into the pieces of Kubernetes
configuration needed to run it: labels, pod volumes, the data volume claim
template, the peer list for the xenon high-availability agent, tuned InnoDB
settings and definitions for the pod's containers.

It has no dependencies beyond the standard library.

## Installing

```
pip install .
```

Running the tests needs the `test` extra:

```
pip install ".[test]"
pytest
```

## Describing a cluster

A cluster is described by a `MysqlClusterResource` from `mysqlop.spec`. It
holds an `ObjectMeta` (from `mysqlop.kube`) with the name, namespace,
annotations and uid, and a `ClusterSpec` with these sections:

- `MysqlOpts`: `user`, `root_password`, `root_host` (default `localhost`),
  `init_tokudb`, `mysql_conf` and `resources`.
- `XenonOpts`: `image`, `admit_defeat_heartbeat_count`, `election_timeout`,
  `resources`.
- `MetricsOpts`: `enabled`, `image`, `resources`.
- `PodPolicy`: `image_pull_policy` (default `IfNotPresent`),
  `sidecar_image`, `busybox_image` (default `busybox`), `extra_resources`.
- `Persistence`: `enabled`, `access_modes`, `storage_class`, `size`
  (default `10Gi`).

`ClusterSpec` also has `replicas` (default 3), `mysql_version` (default
`5.7`), `backup_secret_name`, `restore_from` and `nfs_server_address`.
`MysqlClusterResource.copy()` returns an independent deep copy.

Resource requirements are `ResourceRequirements(limits=..., requests=...)`
with quantity strings as values, for example `{"memory": "2Gi"}` or
`{"cpu": "500m"}`.

## Working with a cluster

`MysqlCluster` from `mysqlop.cluster` wraps a resource (`unwrap()` returns
it) and derives everything else from it:

- `validate()` raises `ValidationError` (a `ValueError`) when
  `mysql_opts.user` is `root` or one of the reserved operator accounts, or
  when `mysql_opts.root_host` is `127.0.0.1`. With MySQL `8.0` and
  `init_tokudb` set it only logs that TokuDB is unsupported and returns.
- `get_labels()` returns the full label set; the
  `app.kubernetes.io/instance`, `app.kubernetes.io/component` and
  `app.kubernetes.io/part-of` annotations override or add to it.
  `get_selector_labels()` returns the three labels used as a selector.
- `get_mysql_version()` maps `5.7` to `5.7.34` and `8.0` to `8.0.25`; any
  other value is logged as an error and gives `0.0.0`.
- `get_name_for_resource(name)` names derived resources from a
  `ResourceName` (in `mysqlop.constants`): `<name>-mysql` for the
  statefulset, config map, headless service and disruption budget,
  `<name>-leader`, `<name>-follower`, `<name>-metrics`, `<name>-secret` and
  `<name>-xenon`; anything else gives the cluster name itself.
- `get_pod_host_name(index)` and `create_peers()` give pod host names such
  as `sample-mysql-0.sample-mysql.default` and the comma separated xenon
  peer list on port 8801.
- `ensure_volumes()` returns the pod's `Volume` list: an empty-dir data
  volume when persistence is off, the host's transparent-hugepage
  directory when TokuDB is enabled, and an NFS volume when
  `nfs_server_address` is set, around the fixed configuration, log,
  script and time-zone volumes.
- `ensure_volume_claim_templates()` returns an empty list when persistence
  is off, otherwise one `PersistentVolumeClaim` named `data` owned by the
  cluster. A storage class of `-` becomes the empty string; an
  unparseable `size` raises `ValueError`.
- `ensure_mysql_conf()` writes `innodb_buffer_pool_size` and
  `innodb_buffer_pool_instances` into `mysql_opts.mysql_conf`, from the
  memory request, the CPU limit and any buffer pool size already set.
- `get_cluster_key()` and `get_key()` return an `ObjectKey`.

Helpers in the same module: `size_to_bytes("512M")` (units K, M, G in
powers of 1024, raising `ValueError` otherwise), `is_cluster_kind(kind)`
and `get_prefix_from_env()`, which returns the `IMAGE_PREFIX` environment
variable followed by `/`, or an empty string when it is unset.

Quantity strings are read by `parse_quantity` (an exact `Fraction`),
`quantity_value` and `quantity_milli_value` (both rounded up) from
`mysqlop.quantity`.

## Containers

`ensure_container(name, cluster)` from `mysqlop.containers` returns a
`Container` for one of `mysql`, `xenon`, `slowlog` or `auditlog`, and
raises `ValueError` for any other name. Each is built by a
`ContainerBuilder` subclass (`MysqlContainer`, `XenonContainer`,
`SlowLogContainer`, `AuditLogContainer`); its `build()` prefixes the image
with `get_prefix_from_env()`. `Container`, `Volume`, `Probe` and
`PersistentVolumeClaim` offer `to_dict()` for writing manifests.

```python
from mysqlop.cluster import MysqlCluster
from mysqlop.containers import ensure_container
from mysqlop.kube import ObjectMeta
from mysqlop.spec import ClusterSpec, MysqlClusterResource

resource = MysqlClusterResource(
    metadata=ObjectMeta(name="sample", namespace="default"),
    spec=ClusterSpec(mysql_version="5.7", replicas=3),
)
cluster = MysqlCluster(resource)
print(cluster.create_peers())
print(ensure_container("mysql", cluster).to_dict())
```

## What it does not do

`mysqlop` only builds descriptions. It does not connect to a Kubernetes
cluster, apply or watch objects, or run a reconcile loop, and it has no
command-line tool. It builds no init, backup or metrics containers; the
`MetricsOpts`, `backup_secret_name` and `restore_from` settings are carried
in the spec but not used by any builder.