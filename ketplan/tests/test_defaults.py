from ketplan.plan import Plan, PlanTemplateOptions, apply_defaults, build_plan, load_plan_yaml


def test_cni_defaults_when_absent():
    plan = load_plan_yaml("cluster:\n  name: test\n")
    apply_defaults(plan)

    cni = plan.add_ons.cni
    assert cni is not None
    assert cni.provider == "calico"
    assert cni.options.calico.mode == "overlay"
    assert cni.options.calico.log_level == "info"
    assert cni.options.calico.workload_mtu == 1500
    assert cni.options.calico.felix_input_mtu == 1440


def test_cni_mode_from_legacy_networking_type():
    plan = load_plan_yaml("cluster:\n  networking:\n    type: routed\n")
    apply_defaults(plan)
    assert plan.add_ons.cni.options.calico.mode == "routed"


def test_legacy_networking_type_ignored_when_cni_present():
    plan = load_plan_yaml(
        "cluster:\n  networking:\n    type: routed\n"
        "add_ons:\n  cni:\n    provider: weave\n"
    )
    apply_defaults(plan)

    calico = plan.add_ons.cni.options.calico
    assert plan.add_ons.cni.provider == "weave"
    assert calico.mode == ""
    assert calico.log_level == "info"
    assert calico.workload_mtu == 1500
    assert calico.felix_input_mtu == 1440


def test_set_values_are_kept():
    plan = load_plan_yaml("""
cluster:
  certificates:
    ca_expiry: 8760h
add_ons:
  cni:
    provider: calico
    options:
      calico:
        mode: routed
        log_level: debug
        workload_mtu: 9000
        felix_input_mtu: 8980
  dns:
    provider: coredns
  heapster:
    options:
      heapster:
        replicas: 3
        service_type: NodePort
        sink: influxdb:http://elsewhere:8086
  dashboard:
    disable: true
""")
    apply_defaults(plan)

    calico = plan.add_ons.cni.options.calico
    assert (calico.mode, calico.log_level, calico.workload_mtu, calico.felix_input_mtu) == (
        "routed", "debug", 9000, 8980)
    assert plan.add_ons.dns.provider == "coredns"
    heapster = plan.add_ons.heapster.options.heapster
    assert (heapster.replicas, heapster.service_type, heapster.sink) == (
        3, "NodePort", "influxdb:http://elsewhere:8086")
    assert plan.cluster.certificates.ca_expiry == "8760h"
    assert plan.add_ons.dashboard.disable is True


def test_heapster_defaults():
    plan = Plan()
    apply_defaults(plan)

    options = plan.add_ons.heapster.options
    assert options.heapster.replicas == 2
    assert options.heapster.sink == "influxdb:http://heapster-influxdb.kube-system.svc:8086"
    assert options.heapster.service_type == "ClusterIP"
    assert options.influxdb.pvc_name == ""


def test_legacy_heapster_fields_override():
    plan = load_plan_yaml("""
add_ons:
  heapster:
    options:
      heapster:
        replicas: 3
      heapster_replicas: 4
      influxdb_pvc_name: influx-data
""")
    apply_defaults(plan)

    options = plan.add_ons.heapster.options
    assert options.heapster.replicas == 4
    assert options.influxdb.pvc_name == "influx-data"


def test_dashboard_and_ca_expiry_defaults():
    plan = Plan()
    apply_defaults(plan)

    assert plan.add_ons.dashboard is not None
    assert plan.add_ons.dashboard.disable is False
    assert plan.cluster.certificates.ca_expiry == "17520h"
    assert plan.add_ons.dns.provider == "kubedns"


def test_defaults_match_template():
    defaulted = Plan()
    apply_defaults(defaulted)
    built = build_plan(PlanTemplateOptions(admin_password="password"))

    assert defaulted.add_ons.cni == built.add_ons.cni
    assert defaulted.add_ons.dns == built.add_ons.dns
    assert defaulted.add_ons.heapster == built.add_ons.heapster
    assert defaulted.add_ons.dashboard == built.add_ons.dashboard
    assert defaulted.cluster.certificates.ca_expiry == built.cluster.certificates.ca_expiry


def test_defaults_are_idempotent():
    plan = Plan()
    apply_defaults(plan)
    once = plan.model_dump()
    apply_defaults(plan)
    assert plan.model_dump() == once
