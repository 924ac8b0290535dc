"""Tests for system capabilities."""

import os
import stat
import sys

import pytest

from tulip.errors import ExternalCommandFailed, TulipIOError
from tulip.system import KernelSetting, SubprocessExecutor, apply_setting, create_private_file


def test_subprocess_executor_captures_output():
    """Test running a real command."""
    result = SubprocessExecutor().run([sys.executable, "-c", "import sys; print(sys.stdin.read().upper())"],
                                      input="hello")
    assert result.ok
    assert result.stdout.strip() == "HELLO"


def test_subprocess_executor_failure():
    """Test non-zero exit and spawn failures."""
    with pytest.raises(ExternalCommandFailed) as exc_info:
        SubprocessExecutor().run([sys.executable, "-c", "import sys; sys.exit(3)"])
    assert exc_info.value.returncode == 3

    result = SubprocessExecutor().run([sys.executable, "-c", "import sys; sys.exit(3)"], check=False)
    assert result.returncode == 3

    with pytest.raises(ExternalCommandFailed) as exc_info:
        SubprocessExecutor().run(["/nonexistent/tulip-command"])
    assert exc_info.value.returncode is None


def test_create_private_file(tmp_path):
    """Test owner-only file creation."""
    path = tmp_path / "secret.conf"
    path.write_text("old")
    os.chmod(path, 0o644)

    create_private_file(path, "new")
    assert path.read_text() == "new"
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    with pytest.raises(FileExistsError):
        create_private_file(path, "newer", exclusive=True)
    assert path.read_text() == "new"


def test_kernel_setting_literals():
    """Test the on/off values of each setting."""
    assert KernelSetting.WIREGUARD_DEBUG.literal(True) == "module wireguard +p"
    assert KernelSetting.WIREGUARD_DEBUG.literal(False) == "module wireguard -p"
    assert KernelSetting.WIREGUARD_DEBUG.path == "/sys/kernel/debug/dynamic_debug/control"
    assert KernelSetting.IPV4_FORWARDING.literal(True) == "1"
    assert KernelSetting.IPV6_FORWARDING.literal(False) == "0"


def test_apply_setting():
    """Test that apply_setting writes the literal to the setting's path."""
    writes = []
    apply_setting(KernelSetting.IPV4_FORWARDING, True, writer=lambda p, v: writes.append((p, v)))
    assert writes == [("/proc/sys/net/ipv4/ip_forward", "1")]


def test_apply_setting_failure():
    """Test that write failures are reported."""
    def writer(path, value):
        raise PermissionError(13, "Permission denied", path)

    with pytest.raises(TulipIOError):
        apply_setting(KernelSetting.WIREGUARD_DEBUG, True, writer=writer)
