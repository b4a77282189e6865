"""
Asynchronous runner for external commands.

Spawns a command with all three standard streams piped, feeds optional input,
and collects stdout/stderr in full. A nonzero exit code or a failure to start
raises ProcessFailure carrying whatever was captured.
"""

import asyncio
import logging
import shlex
from pathlib import Path
from typing import Dict, Optional, Sequence

from exampledocs.errors import ProcessFailure
from exampledocs.schemas import ProcessResult

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Run external commands one invocation at a time, without retries."""

    def __init__(self, env: Optional[Dict[str, str]] = None, encoding: str = "utf-8"):
        """
        Initialize the runner.

        Args:
            env: Environment for spawned processes (default: inherit)
            encoding: Encoding used for input and captured output
        """
        self.env = env
        self.encoding = encoding

    async def run(
        self,
        command: str,
        args: Sequence[str] = (),
        cwd: Optional[Path] = None,
        input: Optional[str] = None,
    ) -> ProcessResult:
        """
        Run a command to completion.

        Args:
            command: Executable name or path
            args: Arguments passed to the executable
            cwd: Working directory for the process
            input: Text written to stdin; stdin is closed immediately when None

        Returns:
            ProcessResult with the complete captured output and exit code 0

        Raises:
            ProcessFailure: If the process cannot start or exits nonzero
        """
        argv = [command, *args]
        logger.info(f"$ {shlex.join(argv)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd) if cwd else None,
                env=self.env,
            )
        except OSError as e:
            raise ProcessFailure(argv, stderr=str(e), code=None) from e

        if input is None:
            # Line-oriented tools wait on stdin until it is closed
            process.stdin.close()
            stdout, stderr = await process.communicate()
        else:
            stdout, stderr = await process.communicate(input.encode(self.encoding))

        result = ProcessResult(
            stdout=stdout.decode(self.encoding, errors="replace"),
            stderr=stderr.decode(self.encoding, errors="replace"),
            code=process.returncode,
        )

        if result.code != 0:
            logger.debug(f"Exited with code {result.code}: {result.stderr.strip()}")
            raise ProcessFailure(argv, stdout=result.stdout, stderr=result.stderr, code=result.code)

        return result
