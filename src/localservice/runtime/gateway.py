"""Runtime command gateway.

Runs a single docker command as an asyncio subprocess and returns its trimmed
output. Failures surface as RuntimeInvocationError.
"""

from __future__ import annotations

import asyncio
import os
import shlex
from collections.abc import Callable, Mapping, Sequence

import structlog

from ..errors import RuntimeInvocationError

logger = structlog.get_logger(__name__)

DOCKER_EXECUTABLE = "docker"


class RuntimeGateway:
    """Execute commands against the docker CLI."""

    def __init__(
        self,
        executable: str = DOCKER_EXECUTABLE,
        verbose: bool = False,
        echo: Callable[[str], None] | None = None,
    ):
        """Initialize gateway.

        Args:
            executable: Container runtime executable name or path.
            verbose: Whether to echo each command and its output.
            echo: Output function used in verbose mode.
        """
        self.executable = executable
        self.verbose = verbose
        self.echo = echo

    async def run(
        self,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
        input: bytes | None = None,
    ) -> str:
        """Run a docker command.

        Args:
            args: Arguments following the executable.
            env: Extra environment variables for the subprocess, used to hand
                secrets to ``-e NAME`` flags.
            input: Bytes written to the process stdin.

        Returns:
            Stripped stdout.

        Raises:
            RuntimeInvocationError: If the executable is missing or exits non-zero.
        """
        cmd = [self.executable, *args]
        display = shlex.join(cmd)
        if self.verbose and self.echo:
            self.echo(f"> {display}")
        logger.debug("runtime_command", command=display)

        process_env = None
        if env:
            process_env = dict(os.environ)
            process_env.update({key: str(value) for key, value in env.items()})

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE if input is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=process_env,
            )
        except FileNotFoundError as e:
            raise RuntimeInvocationError(
                message="Docker not found. Is Docker installed?",
                command=cmd,
            ) from e
        except OSError as e:
            raise RuntimeInvocationError(
                message=f"Failed to start command: {display} ({e})",
                command=cmd,
            ) from e

        stdout, stderr = await process.communicate(input=input)
        out = stdout.decode("utf-8", errors="replace").strip()
        err = stderr.decode("utf-8", errors="replace").strip()

        if process.returncode != 0:
            logger.debug(
                "runtime_command_failed",
                command=display,
                returncode=process.returncode,
                stderr=err,
            )
            raise RuntimeInvocationError(
                message=f"Command failed ({process.returncode}): {display}\n{err or out}",
                command=cmd,
                returncode=process.returncode,
            )

        if self.verbose and self.echo:
            self.echo(f'> "{out}"')
        return out
