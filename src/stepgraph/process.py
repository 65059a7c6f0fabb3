# process.py
from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

# (program, args, cwd, env) -> exit status
Executor = Callable[[str, Sequence[str], Path, Optional[Mapping[str, str]]], int]

# Shell convention for "command not found"
EXIT_NOT_FOUND = 127


def format_command(program: str, args: Sequence[str]) -> str:
    return shlex.join([program, *args])


def run_process(
    program: str,
    args: Sequence[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
) -> int:
    """
    Run an external command and block until it exits.

    Output is not captured; it goes straight to the terminal so long
    pack/publish commands stay visible while they run.

    Returns:
        The process exit status. A program that cannot be found maps to 127.
    """
    cwd = Path(cwd)
    if not cwd.exists():
        raise FileNotFoundError(f"working directory not found: {cwd}")

    full_env = os.environ.copy()
    if env:
        full_env.update(env)

    try:
        proc = subprocess.run(
            [program, *args],
            shell=False,
            cwd=str(cwd),
            env=full_env,
        )
    except FileNotFoundError:
        return EXIT_NOT_FOUND
    return proc.returncode
