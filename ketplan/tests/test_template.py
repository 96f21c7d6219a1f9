import re

import pytest
from pydantic import ValidationError

from ketplan.plan import (
    Node,
    PasswordGenerationError,
    Plan,
    PlanReadWriter,
    PlanTemplateOptions,
    PlanWriteError,
    build_plan,
    write_plan_template,
)
from ketplan.plan.template import (
    PASSWORD_ATTEMPTS,
    PasswordRequirements,
    generate_alphanumeric_password,
    random_password,
)

ALPHANUMERIC = re.compile(r"^[a-zA-Z0-9]+$")


@pytest.mark.parametrize("etcd,master,worker,ingress,storage,nfs", [
    (0, 0, 0, 0, 0, 0),
    (1, 1, 1, 1, 1, 1),
    (3, 2, 5, 0, 4, 2),
])
def test_build_creates_requested_placeholders(etcd, master, worker, ingress, storage, nfs):
    opts = PlanTemplateOptions(
        etcd_nodes=etcd, master_nodes=master, worker_nodes=worker,
        ingress_nodes=ingress, storage_nodes=storage, nfs_volumes=nfs,
        admin_password="password",
    )
    plan = build_plan(opts)

    expected = {"etcd": etcd, "master": master, "worker": worker, "ingress": ingress, "storage": storage}
    for role, group in plan.node_groups().items():
        assert group.expected_count == expected[role]
        assert len(group.nodes) == expected[role]
        assert all(n == Node() for n in group.nodes)

    assert len(plan.nfs.nfs_volume) == nfs
    for v in plan.nfs.nfs_volume:
        assert v.nfs_host == ""
        assert v.mount_path == "/"


def test_build_scenario():
    opts = PlanTemplateOptions(
        etcd_nodes=3, master_nodes=1, worker_nodes=2,
        ingress_nodes=0, storage_nodes=0, nfs_volumes=1, admin_password="",
    )
    plan = build_plan(opts)

    assert len(plan.etcd.nodes) == 3
    assert len(plan.master.nodes) == 1
    assert len(plan.worker.nodes) == 2
    assert plan.ingress.nodes == []
    assert plan.storage.nodes == []
    assert len(plan.nfs.nfs_volume) == 1
    assert plan.nfs.nfs_volume[0].nfs_host == ""
    assert plan.nfs.nfs_volume[0].mount_path == "/"
    assert plan.cluster.networking.pod_cidr_block == "172.16.0.0/16"
    assert plan.cluster.networking.service_cidr_block == "172.20.0.0/16"
    assert plan.cluster.certificates.ca_expiry == "17520h"
    assert len(plan.cluster.admin_password) >= 16
    assert ALPHANUMERIC.match(plan.cluster.admin_password)


def test_build_sets_cluster_defaults():
    plan = build_plan(PlanTemplateOptions(admin_password="password"))

    assert plan.cluster.name == "kubernetes"
    assert plan.cluster.ssh.user == "kismaticuser"
    assert plan.cluster.ssh.key == "kismaticuser.key"
    assert plan.cluster.ssh.port == 22
    assert plan.cluster.certificates.expiry == "17520h"
    assert plan.add_ons.cni.provider == "calico"
    assert plan.add_ons.dns.provider == "kubedns"
    assert plan.add_ons.heapster.options.heapster.replicas == 2
    assert plan.add_ons.package_manager.provider == "helm"
    assert plan.add_ons.dashboard.disable is False


def test_build_keeps_given_password():
    def generator(reqs):
        raise AssertionError("generator should not be called")

    plan = build_plan(PlanTemplateOptions(admin_password="s3cret"), password_generator=generator)
    assert plan.cluster.admin_password == "s3cret"


def test_build_never_sets_deprecated_fields():
    plan = build_plan(PlanTemplateOptions(etcd_nodes=1, admin_password="password"))

    assert plan.features is None
    assert plan.cluster.allow_package_installation is None
    assert plan.cluster.networking.type is None
    assert plan.add_ons.dashboard_deprecated is None
    assert plan.docker_registry.address is None
    assert plan.docker_registry.port is None
    assert plan.add_ons.heapster.options.heapster_replicas is None
    assert plan.add_ons.heapster.options.influxdb_pvc_name is None

    data = plan.to_yaml_dict()
    assert "features" not in data
    assert "dashbard" not in data["add_ons"]
    assert "address" not in data["docker_registry"]


def test_negative_counts_rejected():
    with pytest.raises(ValidationError):
        PlanTemplateOptions(etcd_nodes=-1)


def test_password_generation_is_bounded():
    calls = []

    def generator(reqs):
        calls.append(reqs)
        return "not-alphanumeric!"

    with pytest.raises(PasswordGenerationError):
        build_plan(PlanTemplateOptions(), password_generator=generator)
    assert len(calls) == PASSWORD_ATTEMPTS == 6


def test_password_requirements():
    seen = []

    def generator(reqs):
        seen.append(reqs)
        return "abcdefghijklmnop"

    generate_alphanumeric_password(generator)

    reqs = seen[0]
    assert reqs.minimum_total_length == 16
    assert 0 <= reqs.uppercase <= 5
    assert 0 <= reqs.digits <= 5
    assert reqs.punctuation == -1


def test_password_retries_until_alphanumeric():
    candidates = iter(["bad-one!", "bad_two?", "GoodPassword1234"])
    calls = []

    def generator(reqs):
        calls.append(reqs)
        return next(candidates)

    assert generate_alphanumeric_password(generator) == "GoodPassword1234"
    assert len(calls) == 3


def test_password_generator_error_propagates():
    calls = []

    def generator(reqs):
        calls.append(reqs)
        raise ValueError("broken generator")

    with pytest.raises(ValueError):
        generate_alphanumeric_password(generator)
    assert len(calls) == 1


def test_random_password_meets_requirements():
    reqs = PasswordRequirements(minimum_total_length=16, uppercase=5, digits=5)
    password = random_password(reqs)

    assert len(password) >= 16
    assert ALPHANUMERIC.match(password)
    assert sum(c.isupper() for c in password) >= 5
    assert sum(c.isdigit() for c in password) >= 5


class MemoryPlanner:
    def __init__(self, fail=False):
        self.fail = fail
        self.written = []

    def read(self) -> Plan:
        return self.written[-1]

    def write(self, plan: Plan) -> None:
        if self.fail:
            raise PlanWriteError("disk full")
        self.written.append(plan)


def test_write_plan_template_uses_planner():
    planner: PlanReadWriter = MemoryPlanner()
    options = PlanTemplateOptions(etcd_nodes=1, master_nodes=1, worker_nodes=2)

    plan = write_plan_template(options, planner, password_generator=lambda reqs: "Generated123")

    assert planner.written == [plan]
    assert planner.read().cluster.admin_password == "Generated123"
    assert len(planner.read().worker.nodes) == 2


def test_write_plan_template_wraps_write_error():
    with pytest.raises(PlanWriteError, match="error writing installation plan template: disk full"):
        write_plan_template(
            PlanTemplateOptions(), MemoryPlanner(fail=True), password_generator=lambda reqs: "abc"
        )
