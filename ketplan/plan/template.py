"""Generate a new plan with defaults filled in."""
import logging
import random
import re
import string
from dataclasses import dataclass
from typing import Callable, Optional

from pydantic import BaseModel, Field
from tenacity import RetryError, Retrying, retry_if_exception_type, stop_after_attempt

from .constants import (
    CNI_PROVIDER_CALICO,
    DEFAULT_CA_EXPIRY,
    DEFAULT_CALICO_LOG_LEVEL,
    DEFAULT_CALICO_MODE,
    DEFAULT_CERT_EXPIRY,
    DEFAULT_CLUSTER_NAME,
    DEFAULT_DNS_PROVIDER,
    DEFAULT_FELIX_INPUT_MTU,
    DEFAULT_HEAPSTER_REPLICAS,
    DEFAULT_HEAPSTER_SERVICE_TYPE,
    DEFAULT_HEAPSTER_SINK,
    DEFAULT_NFS_MOUNT_PATH,
    DEFAULT_PACKAGE_MANAGER_PROVIDER,
    DEFAULT_POD_CIDR_BLOCK,
    DEFAULT_SERVICE_CIDR_BLOCK,
    DEFAULT_SSH_KEY,
    DEFAULT_SSH_PORT,
    DEFAULT_SSH_USER,
    DEFAULT_WORKLOAD_MTU,
)
from .errors import PasswordGenerationError, PlanWriteError
from .models import CNI, Dashboard, HeapsterMonitoring, NFSVolume, Node, Plan
from .planner import PlanReadWriter

logger = logging.getLogger("ketplan.plan.template")

PASSWORD_ATTEMPTS = 6
PASSWORD_MIN_LENGTH = 16
# Upper bound (inclusive) of the randomized uppercase and digit minimums
PASSWORD_MAX_CLASS_COUNT = 5

_ALPHANUMERIC_RE = re.compile(r"^[a-zA-Z0-9]+$")

_system_random = random.SystemRandom()


class PlanTemplateOptions(BaseModel):
    """Options for generating a plan file template."""
    etcd_nodes: int = Field(default=0, ge=0, description="Number of etcd nodes")
    master_nodes: int = Field(default=0, ge=0, description="Number of master nodes")
    worker_nodes: int = Field(default=0, ge=0, description="Number of worker nodes")
    ingress_nodes: int = Field(default=0, ge=0, description="Number of ingress nodes")
    storage_nodes: int = Field(default=0, ge=0, description="Number of storage nodes")
    nfs_volumes: int = Field(default=0, ge=0, description="Number of NFS volume entries")
    admin_password: str = Field(default="", description="Generated when empty")


@dataclass(frozen=True)
class PasswordRequirements:
    """Constraints passed to a password generator.

    ``punctuation`` of -1 asks the generator for no punctuation at all.
    """
    minimum_total_length: int
    uppercase: int
    digits: int
    punctuation: int = -1


PasswordGenerator = Callable[[PasswordRequirements], str]


class _NotAlphanumeric(Exception):
    pass


def random_password(reqs: PasswordRequirements) -> str:
    """Generate a password meeting ``reqs`` using the system random source."""
    chars = [_system_random.choice(string.ascii_uppercase) for _ in range(reqs.uppercase)]
    chars += [_system_random.choice(string.digits) for _ in range(reqs.digits)]
    pool = string.ascii_letters + string.digits
    if reqs.punctuation > 0:
        chars += [_system_random.choice(string.punctuation) for _ in range(reqs.punctuation)]
    while len(chars) < reqs.minimum_total_length:
        chars.append(_system_random.choice(pool))
    _system_random.shuffle(chars)
    return "".join(chars)


def _password_candidate(generator: PasswordGenerator) -> str:
    reqs = PasswordRequirements(
        minimum_total_length=PASSWORD_MIN_LENGTH,
        uppercase=random.randint(0, PASSWORD_MAX_CLASS_COUNT),
        digits=random.randint(0, PASSWORD_MAX_CLASS_COUNT),
        punctuation=-1,
    )
    candidate = generator(reqs)
    # the generator is not trusted to honor the punctuation setting
    if not _ALPHANUMERIC_RE.match(candidate):
        raise _NotAlphanumeric()
    return candidate


def generate_alphanumeric_password(generator: Optional[PasswordGenerator] = None) -> str:
    """Generate a random alphanumeric password of at least 16 characters.

    Args:
        generator: Produces a candidate for the given requirements. Defaults to
            ``random_password``.

    Raises:
        PasswordGenerationError: If no candidate was alphanumeric within the
            attempt budget.
    """
    generator = generator or random_password
    try:
        for attempt in Retrying(
            stop=stop_after_attempt(PASSWORD_ATTEMPTS),
            retry=retry_if_exception_type(_NotAlphanumeric),
        ):
            with attempt:
                password = _password_candidate(generator)
    except RetryError as e:
        raise PasswordGenerationError(
            f"failed to generate alphanumeric password after {PASSWORD_ATTEMPTS} attempts"
        ) from e
    return password


def _placeholder_nodes(count: int):
    return [Node() for _ in range(count)]


def build_plan(
    options: PlanTemplateOptions,
    password_generator: Optional[PasswordGenerator] = None,
) -> Plan:
    """Build a plan with sensible defaults for the requested template options.

    Args:
        options: Node counts, NFS volume count and an optional admin password.
        password_generator: Used when ``options.admin_password`` is empty.

    Returns:
        A new plan with one empty placeholder per requested node and volume.

    Raises:
        PasswordGenerationError: If an admin password had to be generated and
            generation failed.
    """
    admin_password = options.admin_password
    if not admin_password:
        admin_password = generate_alphanumeric_password(password_generator)

    p = Plan()
    p.cluster.name = DEFAULT_CLUSTER_NAME
    p.cluster.admin_password = admin_password
    p.cluster.disable_package_installation = False
    p.cluster.disconnected_installation = False

    p.cluster.ssh.user = DEFAULT_SSH_USER
    p.cluster.ssh.key = DEFAULT_SSH_KEY
    p.cluster.ssh.port = DEFAULT_SSH_PORT

    p.cluster.networking.pod_cidr_block = DEFAULT_POD_CIDR_BLOCK
    p.cluster.networking.service_cidr_block = DEFAULT_SERVICE_CIDR_BLOCK
    p.cluster.networking.update_hosts_files = False

    p.cluster.certificates.expiry = DEFAULT_CERT_EXPIRY
    p.cluster.certificates.ca_expiry = DEFAULT_CA_EXPIRY

    # Add-ons
    p.add_ons.cni = CNI(provider=CNI_PROVIDER_CALICO)
    p.add_ons.cni.options.calico.mode = DEFAULT_CALICO_MODE
    p.add_ons.cni.options.calico.log_level = DEFAULT_CALICO_LOG_LEVEL
    p.add_ons.cni.options.calico.workload_mtu = DEFAULT_WORKLOAD_MTU
    p.add_ons.cni.options.calico.felix_input_mtu = DEFAULT_FELIX_INPUT_MTU

    p.add_ons.dns.provider = DEFAULT_DNS_PROVIDER

    p.add_ons.heapster = HeapsterMonitoring()
    p.add_ons.heapster.options.heapster.replicas = DEFAULT_HEAPSTER_REPLICAS
    p.add_ons.heapster.options.heapster.service_type = DEFAULT_HEAPSTER_SERVICE_TYPE
    p.add_ons.heapster.options.heapster.sink = DEFAULT_HEAPSTER_SINK

    p.add_ons.package_manager.provider = DEFAULT_PACKAGE_MANAGER_PROVIDER

    p.add_ons.dashboard = Dashboard(disable=False)

    # Node groups
    counts = {
        "etcd": options.etcd_nodes,
        "master": options.master_nodes,
        "worker": options.worker_nodes,
        "ingress": options.ingress_nodes,
        "storage": options.storage_nodes,
    }
    for role, group in p.node_groups().items():
        group.expected_count = counts[role]
        group.nodes = _placeholder_nodes(counts[role])

    p.nfs.nfs_volume = [
        NFSVolume(nfs_host="", mount_path=DEFAULT_NFS_MOUNT_PATH)
        for _ in range(options.nfs_volumes)
    ]

    logger.debug(
        f"Built plan template: {options.etcd_nodes} etcd, {options.master_nodes} master, "
        f"{options.worker_nodes} worker, {options.ingress_nodes} ingress, "
        f"{options.storage_nodes} storage, {options.nfs_volumes} NFS volumes"
    )
    return p


def write_plan_template(
    options: PlanTemplateOptions,
    planner: PlanReadWriter,
    password_generator: Optional[PasswordGenerator] = None,
) -> Plan:
    """Build a plan template and write it with ``planner``.

    Raises:
        PasswordGenerationError: If the admin password could not be generated.
        PlanWriteError: If the plan could not be written.
    """
    p = build_plan(options, password_generator)
    try:
        planner.write(p)
    except PlanWriteError as e:
        raise PlanWriteError(f"error writing installation plan template: {e}") from e
    return p
