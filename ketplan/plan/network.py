"""Addresses derived from the plan's networking settings."""
import ipaddress

from .errors import PlanNetworkError
from .models import Plan


def ip_from_cidr(cidr: str, offset: int) -> str:
    """Return the IPv4 address ``offset`` positions past the network address of ``cidr``."""
    try:
        network = ipaddress.IPv4Network(cidr, strict=False)
    except ValueError as e:
        raise PlanNetworkError(f"invalid CIDR block {cidr!r}: {e}") from e
    if offset >= network.num_addresses:
        raise PlanNetworkError(f"CIDR block {cidr} has no address at offset {offset}")
    return str(network.network_address + offset)


def kubernetes_service_ip(plan: Plan) -> str:
    """The cluster IP of the kubernetes API service."""
    try:
        return ip_from_cidr(plan.cluster.networking.service_cidr_block, 1)
    except PlanNetworkError as e:
        raise PlanNetworkError(f"error getting kubernetes service IP: {e}") from e


def dns_service_ip(plan: Plan) -> str:
    """The cluster IP of the DNS service."""
    try:
        return ip_from_cidr(plan.cluster.networking.service_cidr_block, 2)
    except PlanNetworkError as e:
        raise PlanNetworkError(f"error getting DNS service IP: {e}") from e
