"""Default values shared by the template builder and the default resolver."""

DEFAULT_CLUSTER_NAME = "kubernetes"

DEFAULT_SSH_USER = "kismaticuser"
DEFAULT_SSH_KEY = "kismaticuser.key"
DEFAULT_SSH_PORT = 22

DEFAULT_POD_CIDR_BLOCK = "172.16.0.0/16"
DEFAULT_SERVICE_CIDR_BLOCK = "172.20.0.0/16"

# Two years, in hours
DEFAULT_CERT_EXPIRY = "17520h"
DEFAULT_CA_EXPIRY = "17520h"

CNI_PROVIDER_CALICO = "calico"
DEFAULT_CALICO_MODE = "overlay"
DEFAULT_CALICO_LOG_LEVEL = "info"
DEFAULT_WORKLOAD_MTU = 1500
DEFAULT_FELIX_INPUT_MTU = 1440

DEFAULT_DNS_PROVIDER = "kubedns"

DEFAULT_HEAPSTER_REPLICAS = 2
DEFAULT_HEAPSTER_SINK = "influxdb:http://heapster-influxdb.kube-system.svc:8086"
DEFAULT_HEAPSTER_SERVICE_TYPE = "ClusterIP"

DEFAULT_PACKAGE_MANAGER_PROVIDER = "helm"
# Plans written before package_manager moved under add_ons had no provider field
LEGACY_PACKAGE_MANAGER_PROVIDER = "helm"

DEFAULT_NFS_MOUNT_PATH = "/"
