"""
Source formatting for rendered examples.

A language can be mapped to an external formatter command (for example
``pg_format`` for SQL) that reads the source on stdin and prints the result.
Languages without a command get a light normalisation instead.
"""

import json
import logging
import textwrap
from typing import Dict, List, Optional

from exampledocs.process import ProcessRunner

logger = logging.getLogger(__name__)


def normalize_text(text: str, language: str) -> str:
    """Re-indent JSON; otherwise dedent and trim trailing whitespace."""
    if language == "json":
        return json.dumps(json.loads(text), indent=2) + "\n"

    lines = [line.rstrip() for line in textwrap.dedent(text).splitlines()]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines) + "\n"


class CodeFormatter:
    """Format example text per language."""

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        commands: Optional[Dict[str, List[str]]] = None,
    ):
        """
        Initialize the formatter.

        Args:
            runner: Runner for external formatter commands
            commands: Mapping of language -> argv of a stdin/stdout formatter
        """
        self.runner = runner or ProcessRunner()
        self.commands = dict(commands or {})

    async def format(self, text: str, language: str) -> str:
        """
        Format text written in the given language.

        Raises:
            ProcessFailure: If the configured formatter command fails
        """
        command = self.commands.get(language)
        if not command:
            return normalize_text(text, language)

        result = await self.runner.run(command[0], command[1:], input=text)
        return result.stdout
