"""Read and write plan files.

Reading upgrades deprecated fields and fills defaults. Writing dumps the plan
as YAML and then re-scans the output, inserting documentation comments above
the fields listed in ``PLAN_COMMENTS``. Comments found in a plan file are not
kept when it is read back.
"""
import logging
import os
import re
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Protocol, Sequence, Union

import yaml
from pydantic import ValidationError

from .comments import PLAN_COMMENTS
from .defaults import apply_defaults
from .errors import CommentStackError, PlanParseError, PlanReadError, PlanWriteError
from .migrate import migrate
from .models import Plan

logger = logging.getLogger("ketplan.plan.planner")

# Indentation and "- " list markers, then a plain key and a colon that ends the
# line or is followed by whitespace. Only the first group counts toward depth.
_YAML_KEY_RE = re.compile(r"^((?:[ ]*- )*[ ]*)([^\s:#'\"][^\s:]*)[ ]*:(?=\s|$)")

INDENT_WIDTH = 2


class PlanReadWriter(Protocol):
    def read(self) -> Plan:
        ...

    def write(self, plan: Plan) -> None:
        ...


class Planner(PlanReadWriter, Protocol):
    def exists(self) -> bool:
        ...


def _count_leading_spaces(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _commented_line(line: str, comment: Sequence[str], add_newline: bool) -> str:
    indent = " " * _count_leading_spaces(line)
    out = "\n" if add_newline else ""
    for c in comment:
        out += f"{indent}# {c}\n"
    return out + line + "\n"


def annotate_plan_yaml(text: str, comments: Dict[str, Sequence[str]]) -> Iterator[str]:
    """Yield ``text`` line by line with comment blocks inserted.

    The dotted path of each key is tracked with a stack of the keys currently
    open, driven by the key's column. A path found in ``comments`` gets its
    comment block above it and is removed from ``comments``, so each path is
    annotated at most once. A blank line is written whenever the scan leaves
    a nested block.

    Args:
        text: Uncommented YAML with 2-space indentation.
        comments: Working copy of the comment table. It is consumed.

    Raises:
        CommentStackError: If the indentation implies leaving more blocks than
            are open.
    """
    stack: List[str] = []
    prev_indent = -1
    newline_before_comment = True
    for line in text.splitlines():
        matched = _YAML_KEY_RE.match(line)
        if matched:
            key = matched.group(2)
            indent = len(matched.group(1)) // INDENT_WIDTH

            # leaving a nested block
            if indent < prev_indent:
                yield "\n"
                newline_before_comment = False
            if indent <= prev_indent:
                for _ in range(prev_indent - indent + 1):
                    if not stack:
                        raise CommentStackError(
                            f"cannot leave block at depth {prev_indent} for key {key!r}: stack is empty"
                        )
                    stack.pop()
            stack.append(key)
            prev_indent = indent

            path = ".".join(stack)
            comment = comments.pop(path, None)
            if comment is not None:
                yield _commented_line(line, comment, newline_before_comment)
                newline_before_comment = True
                continue
        yield line + "\n"
        newline_before_comment = True


def dump_plan_yaml(plan: Plan) -> str:
    """Marshal ``plan`` to YAML without comments."""
    return yaml.safe_dump(
        plan.to_yaml_dict(),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=INDENT_WIDTH,
        width=float("inf"),
    )


def load_plan_yaml(text: str) -> Plan:
    """Parse plan YAML into a ``Plan`` without migrating or defaulting it.

    Raises:
        PlanParseError: If ``text`` is not YAML or does not match the schema.
    """
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise PlanParseError(f"failed to unmarshal plan: {e}") from e
    if not isinstance(data, dict):
        raise PlanParseError(
            f"failed to unmarshal plan: expected a mapping at the top level, got {type(data).__name__}"
        )
    try:
        return Plan.model_validate(data)
    except ValidationError as e:
        raise PlanParseError(f"failed to unmarshal plan: {e}") from e


class FilePlanner:
    """A plan stored in a file on the local file system."""

    def __init__(self, file: Union[str, Path], comments: Optional[Mapping[str, Sequence[str]]] = None):
        self.file = Path(file)
        self.comments = PLAN_COMMENTS if comments is None else comments
        # names of the migration rules that fired on the last read
        self.migrations_applied: List[str] = []

    def read(self) -> Plan:
        """Read the plan, upgrade deprecated fields and fill defaults.

        Raises:
            PlanReadError: If the file cannot be read.
            PlanParseError: If the file content is not a valid plan.
        """
        try:
            text = self.file.read_text(encoding="utf-8")
        except (IOError, OSError) as e:
            raise PlanReadError(f"could not read file: {e}") from e

        plan = load_plan_yaml(text)
        self.migrations_applied = migrate(plan)
        if self.migrations_applied:
            logger.info(f"Upgraded {len(self.migrations_applied)} deprecated field(s) in {self.file}")
        apply_defaults(plan)
        logger.debug(f"Read plan from {self.file}")
        return plan

    def write(self, plan: Plan) -> None:
        """Write the plan with documentation comments.

        The file is written in place as the comments are inserted. If writing
        fails part way, the file must be treated as corrupt.

        Raises:
            PlanWriteError: If the plan cannot be marshalled or the file written.
            CommentStackError: If comment insertion loses track of the structure.
        """
        one_time_comments = dict(self.comments)
        try:
            text = dump_plan_yaml(plan)
        except yaml.YAMLError as e:
            raise PlanWriteError(f"error marshalling plan to yaml: {e}") from e

        try:
            with open(self.file, "w", encoding="utf-8") as f:
                for chunk in annotate_plan_yaml(text, one_time_comments):
                    f.write(chunk)
        except (IOError, OSError) as e:
            raise PlanWriteError(f"error writing plan file: {e}") from e
        logger.debug(f"Wrote plan to {self.file}")

    def exists(self) -> bool:
        """Return True if the plan file exists."""
        return os.path.exists(self.file)
