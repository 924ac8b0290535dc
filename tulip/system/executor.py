"""External command execution."""

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..errors import ExternalCommandFailed

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of one external command."""
    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandExecutor:
    """
    Runs external commands synchronously.

    Subclasses implement _execute; run() adds logging and exit status
    checking so every executor reports failures the same way.
    """

    def run(
        self,
        argv: Sequence[str],
        input: Optional[str] = None,
        check: bool = True
    ) -> CommandResult:
        """
        Run a command and wait for it to exit.

        Args:
            argv: Command and arguments
            input: Text written to the command's stdin
            check: Raise ExternalCommandFailed on non-zero exit

        Returns:
            CommandResult with captured output
        """
        argv = list(argv)
        logger.debug(f"exec: {' '.join(argv)}")
        result = self._execute(argv, input)

        if result.returncode != 0:
            if check:
                raise ExternalCommandFailed(argv, result.returncode, result.stderr)
            logger.debug(f"'{' '.join(argv)}' exited with status {result.returncode} (ignored)")

        return result

    def _execute(self, argv: List[str], input: Optional[str]) -> CommandResult:
        raise NotImplementedError


class SubprocessExecutor(CommandExecutor):
    """Executor backed by subprocess."""

    def _execute(self, argv: List[str], input: Optional[str]) -> CommandResult:
        try:
            proc = subprocess.run(
                argv,
                input=input,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise ExternalCommandFailed(argv, None, str(e)) from e

        return CommandResult(
            argv=argv,
            returncode=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
        )
