import shlex

from typing import Sequence

from pipeline_harness.config import Target


def build_command(target: Target, user: str, args: Sequence[str],
                  compose: Sequence[str] = ("docker-compose",)) -> list[str]:
    """Compose ``run`` invocation for *target* with *args* appended verbatim."""
    cmd = list(compose)

    for compose_file in target.compose_files:
        cmd.extend(['-f', compose_file])

    cmd.extend(['run', '-u', user, '--rm', target.service])
    cmd.extend(target.command)
    cmd.extend(args)
    return cmd


def format_command(argv: Sequence[str]) -> str:
    return shlex.join(argv)
