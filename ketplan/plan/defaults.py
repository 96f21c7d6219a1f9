"""Fill unset plan fields with their default values.

Runs after migration, so values carried over from deprecated fields count as
set. Nothing that already holds a value is overwritten, except by the legacy
heapster fields, which take precedence over the structured ones.
"""
import logging

from .constants import (
    CNI_PROVIDER_CALICO,
    DEFAULT_CA_EXPIRY,
    DEFAULT_CALICO_LOG_LEVEL,
    DEFAULT_CALICO_MODE,
    DEFAULT_DNS_PROVIDER,
    DEFAULT_FELIX_INPUT_MTU,
    DEFAULT_HEAPSTER_REPLICAS,
    DEFAULT_HEAPSTER_SERVICE_TYPE,
    DEFAULT_HEAPSTER_SINK,
    DEFAULT_WORKLOAD_MTU,
)
from .models import CNI, Dashboard, HeapsterMonitoring, Plan

logger = logging.getLogger("ketplan.plan.defaults")


def _default_cni(p: Plan) -> None:
    if p.add_ons.cni is None:
        cni = CNI(provider=CNI_PROVIDER_CALICO)
        cni.options.calico.mode = DEFAULT_CALICO_MODE
        cni.options.calico.log_level = DEFAULT_CALICO_LOG_LEVEL
        # plans older than add_ons.cni carried the calico mode here
        if p.cluster.networking.type:
            cni.options.calico.mode = p.cluster.networking.type
        p.add_ons.cni = cni
        logger.debug(f"Defaulted CNI to {CNI_PROVIDER_CALICO} ({cni.options.calico.mode})")

    calico = p.add_ons.cni.options.calico
    if not calico.log_level:
        calico.log_level = DEFAULT_CALICO_LOG_LEVEL
    if not calico.felix_input_mtu:
        calico.felix_input_mtu = DEFAULT_FELIX_INPUT_MTU
    if not calico.workload_mtu:
        calico.workload_mtu = DEFAULT_WORKLOAD_MTU


def _default_heapster(p: Plan) -> None:
    if p.add_ons.heapster is None:
        p.add_ons.heapster = HeapsterMonitoring()
    options = p.add_ons.heapster.options

    if not options.heapster.replicas:
        options.heapster.replicas = DEFAULT_HEAPSTER_REPLICAS
    if options.heapster_replicas:
        options.heapster.replicas = options.heapster_replicas
    if not options.heapster.sink:
        options.heapster.sink = DEFAULT_HEAPSTER_SINK
    if not options.heapster.service_type:
        options.heapster.service_type = DEFAULT_HEAPSTER_SERVICE_TYPE
    if options.influxdb_pvc_name:
        options.influxdb.pvc_name = options.influxdb_pvc_name


def apply_defaults(plan: Plan) -> None:
    """Set defaults on every unset optional field of ``plan``, in place."""
    _default_cni(plan)

    if not plan.add_ons.dns.provider:
        plan.add_ons.dns.provider = DEFAULT_DNS_PROVIDER

    _default_heapster(plan)

    if not plan.cluster.certificates.ca_expiry:
        plan.cluster.certificates.ca_expiry = DEFAULT_CA_EXPIRY

    if plan.add_ons.dashboard is None:
        plan.add_ons.dashboard = Dashboard()
