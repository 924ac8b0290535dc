"""System capabilities: external commands, private files and kernel settings."""

from .executor import CommandExecutor, CommandResult, SubprocessExecutor
from .files import create_private_file
from .kernel import KernelSetting, apply_setting

__all__ = [
    "CommandExecutor",
    "CommandResult",
    "SubprocessExecutor",
    "create_private_file",
    "KernelSetting",
    "apply_setting",
]
