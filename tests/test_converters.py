"""Tests for hpc_term.converters — PBS/Torque → Slurm translation."""

from __future__ import annotations

import pytest

from hpc_term.converters import (
    BatchDirective,
    DirectiveKind,
    ResourceRequest,
    collect_resources,
    parse_directive,
    parse_resource_string,
    substitute_env,
    translate,
)


SAMPLE_PBS = """#!/bin/bash
#PBS -N myjob
#PBS -q batch
#PBS -l nodes=2:ppn=8,walltime=02:00:00,mem=32gb
#PBS -j oe
#PBS -m abe
#PBS -M me@example.org

cd $PBS_O_WORKDIR
mpirun -np 16 ./a.out
"""


def _directives(script: str) -> list[str]:
    return [line for line in script.splitlines() if line.startswith("#SBATCH")]


# ---------------------------------------------------------------------------
# translate — whole scripts
# ---------------------------------------------------------------------------

class TestTranslate:
    def test_sample_script(self):
        out = translate(SAMPLE_PBS)
        assert _directives(out) == [
            "#SBATCH --job-name=myjob",
            "#SBATCH --partition=batch",
            "#SBATCH --mail-type=ALL",
            "#SBATCH --mail-user=me@example.org",
            "#SBATCH --nodes=2",
            "#SBATCH --ntasks-per-node=8",
            "#SBATCH --time=02:00:00",
            "#SBATCH --mem=32gb",
        ]

    def test_starts_with_interpreter(self):
        assert translate(SAMPLE_PBS).startswith("#!/bin/bash\n#SBATCH")

    def test_blank_line_separates_body(self):
        lines = translate(SAMPLE_PBS).split("\n")
        assert lines[8] == "#SBATCH --mem=32gb"
        assert lines[9] == ""
        # Body keeps its own lines, in order
        assert lines[10:] == ["#!/bin/bash", "", "cd $SLURM_SUBMIT_DIR", "mpirun -np 16 ./a.out"]

    def test_no_trailing_whitespace(self):
        out = translate(SAMPLE_PBS + "\n\n   \n")
        assert out == out.rstrip()

    def test_resource_decomposition_exact(self):
        out = translate("#PBS -l nodes=2:ppn=8,walltime=02:00:00,mem=32gb")
        assert out == (
            "#!/bin/bash\n"
            "#SBATCH --nodes=2\n"
            "#SBATCH --ntasks-per-node=8\n"
            "#SBATCH --time=02:00:00\n"
            "#SBATCH --mem=32gb"
        )

    def test_resources_emitted_after_per_flag_directives(self):
        out = translate("#PBS -l nodes=1\n#PBS -N late")
        assert _directives(out) == ["#SBATCH --job-name=late", "#SBATCH --nodes=1"]

    def test_resources_emitted_once(self):
        out = translate(
            "#PBS -l walltime=01:00:00\n"
            "#PBS -l walltime=03:00:00,nodes=4\n"
        )
        assert _directives(out) == ["#SBATCH --nodes=4", "#SBATCH --time=03:00:00"]

    def test_none_input(self):
        assert translate(None) == ""

    def test_empty_input(self):
        assert translate("") == ""

    def test_no_directives(self):
        assert translate("echo hi") == "#!/bin/bash\n\necho hi"

    def test_bare_marker_skipped(self):
        assert translate("#PBS\necho hi") == "#!/bin/bash\n\necho hi"

    def test_indented_directive(self):
        assert "#SBATCH --job-name=x" in translate("   #PBS -N x")

    def test_value_whitespace_collapsed(self):
        out = translate("#PBS -o /tmp/my    out.log")
        assert "#SBATCH --output=/tmp/my out.log" in out


# ---------------------------------------------------------------------------
# Flag dispatch
# ---------------------------------------------------------------------------

class TestFlags:
    @pytest.mark.parametrize("flag,option", [
        ("-N", "job-name"),
        ("-q", "partition"),
        ("-o", "output"),
        ("-e", "error"),
        ("-M", "mail-user"),
        ("-A", "account"),
    ])
    def test_direct_flags(self, flag, option):
        assert f"#SBATCH --{option}=value1" in translate(f"#PBS {flag} value1")

    def test_export_all(self):
        assert _directives(translate("#PBS -V")) == ["#SBATCH --export=ALL"]

    @pytest.mark.parametrize("code,events", [
        ("a", "FAIL"), ("b", "BEGIN"), ("e", "END"), ("abe", "ALL"),
    ])
    def test_mail_events(self, code, events):
        assert _directives(translate(f"#PBS -m {code}")) == [f"#SBATCH --mail-type={events}"]

    def test_unknown_mail_code_uppercased(self):
        assert _directives(translate("#PBS -m x")) == ["#SBATCH --mail-type=X"]
        assert _directives(translate("#PBS -m ae")) == ["#SBATCH --mail-type=AE"]

    def test_join_output_is_silent(self):
        assert _directives(translate("#PBS -j oe")) == []

    def test_unrecognized_passthrough(self):
        out = translate("#PBS -W depend=afterok:123")
        assert _directives(out) == [
            "#SBATCH -W depend=afterok:123 # Unrecognized PBS flag"
        ]

    def test_unrecognized_keeps_value(self):
        value = "group_list=hpc_users extra"
        out = translate(f"#PBS -W {value}")
        assert any(value in line for line in _directives(out))

    def test_unrecognized_without_value(self):
        assert _directives(translate("#PBS -r")) == ["#SBATCH -r # Unrecognized PBS flag"]


# ---------------------------------------------------------------------------
# Resource strings
# ---------------------------------------------------------------------------

class TestResources:
    def test_torque_nodes_ppn(self):
        req = parse_resource_string("nodes=2:ppn=8")
        assert req == ResourceRequest(node_count="2", processes_per_node="8")

    def test_pbs_pro_select(self):
        req = parse_resource_string("select=2:ncpus=8:mpiprocs=4:mem=10gb")
        # Only the first ncpus/mpiprocs segment counts; other qualifiers dropped
        assert req == ResourceRequest(node_count="2", processes_per_node="8")

    def test_select_mpiprocs(self):
        req = parse_resource_string("select=3:mpiprocs=16")
        assert req.processes_per_node == "16"

    def test_standalone_ppn_keys(self):
        for key in ("ppn", "ncpus", "mpiprocs"):
            assert parse_resource_string(f"{key}=12").processes_per_node == "12"

    def test_nodes_without_ppn_keeps_previous(self):
        req = parse_resource_string("ppn=4,nodes=3")
        assert req == ResourceRequest(node_count="3", processes_per_node="4")

    def test_unknown_subresource_dropped(self):
        req = parse_resource_string("nodes=1,software=abaqus,naccesspolicy=singlejob")
        assert req == ResourceRequest(node_count="1")

    def test_walltime_and_mem(self):
        req = parse_resource_string("walltime=10:00:00,mem=4gb")
        assert req.wall_time == "10:00:00"
        assert req.memory == "4gb"

    def test_base_is_not_mutated(self):
        base = ResourceRequest(node_count="1")
        updated = parse_resource_string("nodes=5", base)
        assert base.node_count == "1"
        assert updated.node_count == "5"

    def test_empty_value(self):
        assert parse_resource_string("") == ResourceRequest()

    def test_select_mem_not_emitted(self):
        out = translate("#PBS -l select=1:ncpus=4:mem=10gb")
        assert "--mem" not in out

    def test_collect_resources(self):
        req = collect_resources(SAMPLE_PBS)
        assert req.node_count == "2"
        assert req.total_tasks == 16

    def test_collect_resources_empty(self):
        assert collect_resources(None) == ResourceRequest()

    def test_total_tasks_unknown(self):
        assert ResourceRequest(node_count="2").total_tasks is None
        assert ResourceRequest(node_count="n001", processes_per_node="4").total_tasks is None


# ---------------------------------------------------------------------------
# Directive parsing / body substitution
# ---------------------------------------------------------------------------

class TestParseDirective:
    def test_splits_flag_and_value(self):
        assert parse_directive("#PBS -N my job") == BatchDirective(
            flag="-N", value="my job", kind=DirectiveKind.DIRECT,
        )

    def test_non_directive(self):
        assert parse_directive("echo #PBS -N x") is None

    def test_bare_marker(self):
        assert parse_directive("#PBS   ") is None

    def test_kinds(self):
        assert parse_directive("#PBS -l nodes=1").kind is DirectiveKind.RESOURCES
        assert parse_directive("#PBS -j oe").kind is DirectiveKind.JOIN_OUTPUT
        assert parse_directive("#PBS -W x").kind is DirectiveKind.UNRECOGNIZED


class TestBodySubstitution:
    def test_workdir(self):
        assert substitute_env("cd $PBS_O_WORKDIR") == "cd $SLURM_SUBMIT_DIR"

    def test_all_variables(self):
        line = "echo $PBS_JOBID $PBS_ARRAYID > $PBS_NODEFILE.txt"
        assert substitute_env(line) == (
            "echo $SLURM_JOB_ID $SLURM_ARRAY_TASK_ID > $SLURM_JOB_NODELIST.txt"
        )

    def test_ignores_quoting(self):
        assert substitute_env("echo '$PBS_JOBID'") == "echo '$SLURM_JOB_ID'"

    def test_other_text_untouched(self):
        line = "PBS_JOBID=1 ${PBS_JOBID} $PBS_O_HOST"
        assert substitute_env(line) == line

    def test_body_in_translate(self):
        out = translate("#PBS -N x\ncd $PBS_O_WORKDIR && ls")
        assert out.endswith("\ncd $SLURM_SUBMIT_DIR && ls")
