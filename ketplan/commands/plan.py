import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
import yaml

from ketplan.config import Config
from ketplan.plan import (
    FilePlanner,
    PlanError,
    PlanTemplateOptions,
    dns_service_ip,
    kubernetes_service_ip,
    write_plan_template,
)
from ketplan.utils import redact_sensitive_data

app = typer.Typer()

logger = logging.getLogger("ketplan.commands.plan")


def _fail(message: str) -> NoReturn:
    typer.echo(f"❌ {message}", err=True)
    raise typer.Exit(code=1)


@app.command("generate")
def generate_plan_cmd(
    file: Path = typer.Option(Config.PLAN_FILE, "--file", "-f", help="Path to the plan file"),
    etcd_nodes: int = typer.Option(3, min=0, help="Number of etcd nodes"),
    master_nodes: int = typer.Option(2, min=0, help="Number of master nodes"),
    worker_nodes: int = typer.Option(3, min=0, help="Number of worker nodes"),
    ingress_nodes: int = typer.Option(2, min=0, help="Number of ingress nodes"),
    storage_nodes: int = typer.Option(0, min=0, help="Number of storage nodes"),
    nfs_volumes: int = typer.Option(0, min=0, help="Number of NFS volumes"),
    admin_password: Optional[str] = typer.Option(None, help="Admin password; generated when omitted"),
):
    """Generate a plan file template."""
    planner = FilePlanner(file)
    if planner.exists():
        _fail(f"Plan file {file} already exists, edit it or remove it to generate a new one")

    options = PlanTemplateOptions(
        etcd_nodes=etcd_nodes,
        master_nodes=master_nodes,
        worker_nodes=worker_nodes,
        ingress_nodes=ingress_nodes,
        storage_nodes=storage_nodes,
        nfs_volumes=nfs_volumes,
        admin_password=admin_password or "",
    )
    try:
        write_plan_template(options, planner)
    except PlanError as e:
        _fail(str(e))
    typer.echo(f"✅ Generated plan file template at {file}")
    typer.echo("👉 Edit the plan file to further describe your cluster.")


@app.command("normalize")
def normalize_plan_cmd(
    file: Path = typer.Option(Config.PLAN_FILE, "--file", "-f", help="Path to the plan file"),
):
    """Upgrade deprecated fields, fill defaults and rewrite the plan file."""
    planner = FilePlanner(file)
    if not planner.exists():
        _fail(f"Plan file {file} not found")
    try:
        plan = planner.read()
        planner.write(plan)
    except PlanError as e:
        _fail(str(e))
    for name in planner.migrations_applied:
        typer.echo(f"🔧 Upgraded deprecated field: {name}")
    typer.echo(f"✅ Normalized plan written to {file}")


@app.command("show")
def show_plan_cmd(
    file: Path = typer.Option(Config.PLAN_FILE, "--file", "-f", help="Path to the plan file"),
):
    """Print the plan as it will be applied, with secrets redacted."""
    planner = FilePlanner(file)
    try:
        plan = planner.read()
    except PlanError as e:
        _fail(str(e))

    typer.echo(yaml.safe_dump(redact_sensitive_data(plan.to_yaml_dict()), sort_keys=False), nl=False)
    typer.echo("")
    for role, group in plan.node_groups().items():
        typer.echo(f"📦 {role}: {len(group.nodes)} node(s) (expected {group.expected_count})")
    try:
        typer.echo(f"🌐 kubernetes service IP: {kubernetes_service_ip(plan)}")
        typer.echo(f"🌐 DNS service IP: {dns_service_ip(plan)}")
    except PlanError as e:
        logger.warning(f"Could not derive service IPs: {e}")
