"""
Cluster plan file engine.

- models: typed plan document
- comments: documentation written above plan fields
- migrate: upgrade of deprecated fields
- defaults: defaults for unset fields
- template: new plans from node counts
- planner: reading and writing plan files
- network: addresses derived from the plan
"""

from .errors import (
    CommentStackError,
    PasswordGenerationError,
    PlanError,
    PlanNetworkError,
    PlanParseError,
    PlanReadError,
    PlanWriteError,
)
from .models import Plan, Node, NodeGroup, NFSVolume
from .comments import PLAN_COMMENTS
from .migrate import MIGRATION_RULES, migrate
from .defaults import apply_defaults
from .template import (
    PlanTemplateOptions,
    build_plan,
    generate_alphanumeric_password,
    write_plan_template,
)
from .planner import (
    FilePlanner,
    Planner,
    PlanReadWriter,
    annotate_plan_yaml,
    dump_plan_yaml,
    load_plan_yaml,
)
from .network import dns_service_ip, kubernetes_service_ip

__all__ = [
    'Plan',
    'Node',
    'NodeGroup',
    'NFSVolume',
    'PLAN_COMMENTS',
    'MIGRATION_RULES',
    'migrate',
    'apply_defaults',
    'PlanTemplateOptions',
    'build_plan',
    'generate_alphanumeric_password',
    'write_plan_template',
    'FilePlanner',
    'Planner',
    'PlanReadWriter',
    'annotate_plan_yaml',
    'dump_plan_yaml',
    'load_plan_yaml',
    'kubernetes_service_ip',
    'dns_service_ip',
    'PlanError',
    'PlanReadError',
    'PlanParseError',
    'PlanWriteError',
    'PasswordGenerationError',
    'PlanNetworkError',
    'CommentStackError',
]
