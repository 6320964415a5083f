"""PBS/Torque → Slurm batch-script translation.

The translator is line oriented and best effort: it never raises on
malformed input.  Directive lines (``#PBS ...``) are classified and
rewritten as ``#SBATCH`` lines; everything else is copied through with
PBS environment variables renamed to their Slurm equivalents.

Resource requests (``-l``) are accumulated across the whole script and
emitted once, after the per-flag directives, in a fixed order.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace

LOGGER = logging.getLogger(__name__)

PBS_MARKER = "#PBS"
SLURM_MARKER = "#SBATCH"
INTERPRETER = "#!/bin/bash"
UNRECOGNIZED_SUFFIX = "# Unrecognized PBS flag"


class DirectiveKind(enum.Enum):
    """How a PBS flag is translated."""

    DIRECT = "direct"
    EXPORT_ALL = "export-all"
    MAIL_EVENTS = "mail-events"
    RESOURCES = "resources"
    JOIN_OUTPUT = "join-output"
    UNRECOGNIZED = "unrecognized"


# PBS flag → Slurm long option, value copied verbatim.
DIRECT_FLAGS: dict[str, str] = {
    "-N": "job-name",
    "-q": "partition",
    "-o": "output",
    "-e": "error",
    "-M": "mail-user",
    "-A": "account",
}

_SPECIAL_FLAGS: dict[str, DirectiveKind] = {
    "-V": DirectiveKind.EXPORT_ALL,
    "-m": DirectiveKind.MAIL_EVENTS,
    "-l": DirectiveKind.RESOURCES,
    "-j": DirectiveKind.JOIN_OUTPUT,
}

MAIL_EVENTS: dict[str, str] = {
    "a": "FAIL",
    "b": "BEGIN",
    "e": "END",
    "abe": "ALL",
}

# Order matters: replacements are applied sequentially.
ENV_SUBSTITUTIONS: tuple[tuple[str, str], ...] = (
    ("$PBS_O_WORKDIR", "$SLURM_SUBMIT_DIR"),
    ("$PBS_NODEFILE", "$SLURM_JOB_NODELIST"),
    ("$PBS_JOBID", "$SLURM_JOB_ID"),
    ("$PBS_ARRAYID", "$SLURM_ARRAY_TASK_ID"),
)

_PPN_KEYS = ("ppn", "ncpus", "mpiprocs")


@dataclass(frozen=True)
class BatchDirective:
    """A single ``#PBS <flag> <value>`` line after classification."""

    flag: str
    value: str
    kind: DirectiveKind

    def to_slurm(self) -> str | None:
        """Return the ``#SBATCH`` line for this directive.

        Resource and join-output directives produce nothing here;
        resources are emitted in bulk by :func:`translate`.
        """
        if self.kind is DirectiveKind.DIRECT:
            return f"{SLURM_MARKER} --{DIRECT_FLAGS[self.flag]}={self.value}"
        if self.kind is DirectiveKind.EXPORT_ALL:
            return f"{SLURM_MARKER} --export=ALL"
        if self.kind is DirectiveKind.MAIL_EVENTS:
            events = MAIL_EVENTS.get(self.value, self.value.upper())
            return f"{SLURM_MARKER} --mail-type={events}"
        if self.kind is DirectiveKind.UNRECOGNIZED:
            raw = " ".join(p for p in (self.flag, self.value) if p)
            return f"{SLURM_MARKER} {raw} {UNRECOGNIZED_SUFFIX}"
        return None


@dataclass(frozen=True)
class ResourceRequest:
    """Resources accumulated from ``-l`` directives (last write wins)."""

    node_count: str | None = None
    processes_per_node: str | None = None
    wall_time: str | None = None
    memory: str | None = None

    def to_slurm(self) -> list[str]:
        """Slurm lines for every set field, in nodes/tasks/time/mem order."""
        lines: list[str] = []
        for option, value in (
            ("nodes", self.node_count),
            ("ntasks-per-node", self.processes_per_node),
            ("time", self.wall_time),
            ("mem", self.memory),
        ):
            if value:
                lines.append(f"{SLURM_MARKER} --{option}={value}")
        return lines

    @property
    def total_tasks(self) -> int | None:
        """``nodes × ppn`` when both are plain integers, else ``None``."""
        try:
            return int(self.node_count) * int(self.processes_per_node)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None


def classify_flag(flag: str) -> DirectiveKind:
    if flag in DIRECT_FLAGS:
        return DirectiveKind.DIRECT
    return _SPECIAL_FLAGS.get(flag, DirectiveKind.UNRECOGNIZED)


def is_directive(line: str) -> bool:
    return line.strip().startswith(PBS_MARKER)


def parse_directive(line: str) -> BatchDirective | None:
    """Split a ``#PBS`` line into flag and value.

    Returns ``None`` for non-directive lines and for a bare marker with
    no flag token.
    """
    if not is_directive(line):
        return None
    parts = line.strip().split()[1:]
    if not parts:
        return None
    flag = parts[0]
    value = " ".join(parts[1:])
    return BatchDirective(flag=flag, value=value, kind=classify_flag(flag))


def _ppn_from_segments(segments: list[str]) -> str | None:
    for segment in segments:
        key, sep, val = segment.partition("=")
        if sep and key in _PPN_KEYS:
            return val
    return None


def parse_resource_string(
    value: str, base: ResourceRequest | None = None,
) -> ResourceRequest:
    """Fold a PBS resource string (``nodes=2:ppn=8,walltime=...``) into *base*.

    Supports Torque ``nodes=N:ppn=M`` and PBS Pro ``select=N:ncpus=M``.
    Only the node count and the first ppn/ncpus/mpiprocs segment of a
    chunk are kept; other chunk qualifiers are discarded.
    """
    request = base or ResourceRequest()
    for resource in value.split(","):
        key, sep, val = resource.partition("=")
        if not sep:
            if resource:
                LOGGER.debug("Dropping resource without value: %r", resource)
            continue
        if key in ("nodes", "select"):
            segments = val.split(":")
            request = replace(request, node_count=segments[0])
            ppn = _ppn_from_segments(segments[1:])
            if ppn is not None:
                request = replace(request, processes_per_node=ppn)
        elif key in _PPN_KEYS:
            request = replace(request, processes_per_node=val)
        elif key == "walltime":
            request = replace(request, wall_time=val)
        elif key == "mem":
            request = replace(request, memory=val)
        else:
            LOGGER.debug("Dropping unsupported PBS resource %r", key)
    return request


def substitute_env(line: str) -> str:
    """Rename PBS environment variables to their Slurm counterparts."""
    for pbs_name, slurm_name in ENV_SUBSTITUTIONS:
        line = line.replace(pbs_name, slurm_name)
    return line


def collect_resources(source_text: str | None) -> ResourceRequest:
    """Return the merged resource request of every ``-l`` line in a script."""
    request = ResourceRequest()
    if not source_text:
        return request
    for line in source_text.split("\n"):
        directive = parse_directive(line)
        if directive and directive.kind is DirectiveKind.RESOURCES:
            request = parse_resource_string(directive.value, request)
    return request


def translate(source_text: str | None) -> str:
    """Convert a PBS/Torque batch script into a Slurm batch script."""
    if not source_text:
        return ""

    directives: list[str] = []
    body: list[str] = []
    resources = ResourceRequest()

    for line in source_text.split("\n"):
        if not is_directive(line):
            body.append(substitute_env(line))
            continue
        directive = parse_directive(line)
        if directive is None:
            LOGGER.debug("Skipping empty PBS directive: %r", line)
            continue
        if directive.kind is DirectiveKind.RESOURCES:
            resources = parse_resource_string(directive.value, resources)
            continue
        if directive.kind is DirectiveKind.UNRECOGNIZED:
            LOGGER.debug("Passing through unrecognized PBS flag %s", directive.flag)
        slurm_line = directive.to_slurm()
        if slurm_line is not None:
            directives.append(slurm_line)

    directives.extend(resources.to_slurm())

    result = INTERPRETER + "\n"
    if directives:
        result += "\n".join(directives) + "\n"
    result += "\n" + "\n".join(body)
    return result.strip()
