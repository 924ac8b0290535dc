"""Kernel parameters toggled by Tulip."""

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Union

from ..errors import TulipIOError

logger = logging.getLogger(__name__)


class KernelSetting(Enum):
    """
    Named kernel settings.

    Each value is (virtual file path, value when enabled, value when disabled).
    """
    WIREGUARD_DEBUG = (
        "/sys/kernel/debug/dynamic_debug/control",
        "module wireguard +p",
        "module wireguard -p",
    )
    IPV4_FORWARDING = ("/proc/sys/net/ipv4/ip_forward", "1", "0")
    IPV6_FORWARDING = ("/proc/sys/net/ipv6/conf/all/forwarding", "1", "0")

    @property
    def path(self) -> str:
        return self.value[0]

    def literal(self, enabled: bool) -> str:
        """The string written to the virtual file."""
        return self.value[1] if enabled else self.value[2]


def _write_file(path: Union[str, Path], value: str) -> None:
    with open(path, "w") as f:
        f.write(value)


def apply_setting(
    setting: KernelSetting,
    enabled: bool,
    writer: Callable[[str, str], None] = _write_file
) -> None:
    """
    Write a setting's on/off literal to its virtual file.

    Args:
        setting: Setting to change
        enabled: Whether to turn it on
        writer: Function (path, value) doing the write

    Raises:
        TulipIOError if the file cannot be written
    """
    value = setting.literal(enabled)
    logger.info(f"Setting {setting.name.lower()} {'on' if enabled else 'off'}")
    logger.debug(f"write {setting.path!r} <- {value!r}")
    try:
        writer(setting.path, value)
    except OSError as e:
        raise TulipIOError(f"could not write {setting.path}: {e}") from e
