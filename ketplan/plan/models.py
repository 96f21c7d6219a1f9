"""Data models for the cluster plan file.

Field order matches the order keys are written to the plan file. Blocks and
flags that older plan files may omit entirely are ``Optional`` so that the
migration and default steps can tell "absent" apart from "set to the zero
value". Fields marked deprecated are only ever read; they are dropped from the
output when unset.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PlanModel(BaseModel):
    """Base for all plan sections."""

    # hand-edited files often leave string fields unquoted (expiry: 8760)
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def drop_null_values(cls, data: Any) -> Any:
        """Treat an explicit YAML ``null`` as an unset field."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# Cluster

class Networking(PlanModel):
    # Deprecated: calico mode before add_ons.cni existed
    type: Optional[str] = Field(default=None, description="Deprecated networking type")
    pod_cidr_block: str = ""
    service_cidr_block: str = ""
    update_hosts_files: bool = False
    http_proxy: str = ""
    https_proxy: str = ""
    no_proxy: str = ""


class Certificates(PlanModel):
    expiry: str = ""
    ca_expiry: str = ""


class SSHConfig(PlanModel):
    user: str = ""
    key: str = Field(default="", alias="ssh_key")
    port: int = Field(default=0, alias="ssh_port")


class APIServer(PlanModel):
    option_overrides: Dict[str, str] = Field(default_factory=dict)


class CloudProvider(PlanModel):
    provider: str = ""
    config: str = ""


class Cluster(PlanModel):
    name: str = ""
    admin_password: str = ""
    disable_package_installation: bool = False
    disconnected_installation: bool = False
    networking: Networking = Field(default_factory=Networking)
    certificates: Certificates = Field(default_factory=Certificates)
    ssh: SSHConfig = Field(default_factory=SSHConfig)
    kube_apiserver: APIServer = Field(default_factory=APIServer)
    cloud_provider: CloudProvider = Field(default_factory=CloudProvider)
    # Deprecated: renamed to disable_package_installation (inverted)
    allow_package_installation: Optional[bool] = None


# Docker

class DirectLVM(PlanModel):
    enabled: bool = False
    block_device: str = ""
    enable_deferred_deletion: bool = False


class DockerStorage(PlanModel):
    direct_lvm: DirectLVM = Field(default_factory=DirectLVM)


class Docker(PlanModel):
    disable: bool = False
    storage: DockerStorage = Field(default_factory=DockerStorage)


class DockerRegistry(PlanModel):
    server: str = ""
    ca: str = Field(default="", alias="CA")
    username: str = ""
    password: str = ""
    # Deprecated: combined into server as "address:port"
    address: Optional[str] = None
    port: Optional[int] = None


# Add-ons

class CalicoOptions(PlanModel):
    mode: str = ""
    log_level: str = ""
    workload_mtu: int = 0
    felix_input_mtu: int = 0


class CNIOptions(PlanModel):
    calico: CalicoOptions = Field(default_factory=CalicoOptions)


class CNI(PlanModel):
    disable: bool = False
    provider: str = ""
    options: CNIOptions = Field(default_factory=CNIOptions)


class DNS(PlanModel):
    disable: bool = False
    provider: str = ""


class Heapster(PlanModel):
    replicas: int = 0
    service_type: str = ""
    sink: str = ""


class InfluxDB(PlanModel):
    pvc_name: str = ""


class HeapsterOptions(PlanModel):
    heapster: Heapster = Field(default_factory=Heapster)
    influxdb: InfluxDB = Field(default_factory=InfluxDB)
    # Deprecated: flat fields used before the heapster/influxdb sub-blocks
    heapster_replicas: Optional[int] = None
    influxdb_pvc_name: Optional[str] = None


class HeapsterMonitoring(PlanModel):
    disable: bool = False
    options: HeapsterOptions = Field(default_factory=HeapsterOptions)


class Dashboard(PlanModel):
    disable: bool = False


class PackageManager(PlanModel):
    disable: bool = False
    provider: str = ""


class Rescheduler(PlanModel):
    disable: bool = False


class AddOns(PlanModel):
    cni: Optional[CNI] = None
    dns: DNS = Field(default_factory=DNS)
    heapster: Optional[HeapsterMonitoring] = None
    dashboard: Optional[Dashboard] = None
    package_manager: PackageManager = Field(default_factory=PackageManager)
    rescheduler: Rescheduler = Field(default_factory=Rescheduler)
    # Deprecated: the dashboard block was once written under this misspelled key
    dashboard_deprecated: Optional[Dashboard] = Field(default=None, alias="dashbard")


class DeprecatedPackageManager(PlanModel):
    enabled: bool = False


class Features(PlanModel):
    """Deprecated: package_manager moved to add_ons."""
    package_manager: Optional[DeprecatedPackageManager] = None


# Nodes

class Node(PlanModel):
    host: str = ""
    ip: str = ""
    internalip: str = ""
    labels: Optional[Dict[str, str]] = None


class NodeGroup(PlanModel):
    expected_count: int = 0
    nodes: List[Node] = Field(default_factory=list)


class MasterNodeGroup(NodeGroup):
    load_balanced_fqdn: str = ""
    load_balanced_short_name: str = ""


class NFSVolume(PlanModel):
    nfs_host: str = ""
    mount_path: str = ""


class NFS(PlanModel):
    nfs_volume: List[NFSVolume] = Field(default_factory=list)


class Plan(PlanModel):
    """The root of a cluster plan file."""

    cluster: Cluster = Field(default_factory=Cluster)
    docker: Docker = Field(default_factory=Docker)
    docker_registry: DockerRegistry = Field(default_factory=DockerRegistry)
    add_ons: AddOns = Field(default_factory=AddOns)
    features: Optional[Features] = None
    etcd: NodeGroup = Field(default_factory=NodeGroup)
    master: MasterNodeGroup = Field(default_factory=MasterNodeGroup)
    worker: NodeGroup = Field(default_factory=NodeGroup)
    ingress: NodeGroup = Field(default_factory=NodeGroup)
    storage: NodeGroup = Field(default_factory=NodeGroup)
    nfs: NFS = Field(default_factory=NFS)

    def node_groups(self) -> Dict[str, NodeGroup]:
        """Return the node groups keyed by role, in plan order."""
        return {
            "etcd": self.etcd,
            "master": self.master,
            "worker": self.worker,
            "ingress": self.ingress,
            "storage": self.storage,
        }

    def to_yaml_dict(self) -> Dict[str, Any]:
        """Return the plan as plain data keyed by the plan file's field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
