"""
Starting and stopping Tulip networks.

Starting walks the interface through a fixed sequence of external
commands:

    Absent -> Created -> Addressed -> Routed
           -> Configured (bootstrap peers) -> Configured (all peers)

Each command runs synchronously and any failure aborts the start with the
steps already taken left in place; stop() is the way back to Absent.
"""

import ipaddress
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from ..config import Settings
from ..errors import ServerModeRequiresPort
from ..models import Network, Phonebook, PrivateId
from ..system import (
    CommandExecutor,
    KernelSetting,
    SubprocessExecutor,
    apply_setting,
    create_private_file,
)
from .phonebook import PhonebookResolver
from .wg_conf import interface_name, render_network_conf, render_phonebook_conf

logger = logging.getLogger(__name__)


class InterfaceState(str, Enum):
    """States of the WireGuard interface while starting."""
    ABSENT = "absent"
    CREATED = "created"
    ADDRESSED = "addressed"
    ROUTED = "routed"
    BOOTSTRAP_CONFIGURED = "bootstrap_configured"
    CONFIGURED = "configured"


@dataclass
class Step:
    """One external command of the start sequence."""
    description: str
    argv: List[str]
    reaches: Optional[InterfaceState] = None


class NetworkController:
    """
    Drives a network's WireGuard interface.

    Assumes exclusive control of the interface for the duration of a call.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        executor: Optional[CommandExecutor] = None,
        resolver: Optional[PhonebookResolver] = None,
        kernel_writer: Optional[Callable[[str, str], None]] = None
    ):
        """
        Initialize the controller.

        Args:
            settings: Tunables (defaults from the environment)
            executor: Command executor (subprocess if None)
            resolver: Phonebook resolver for joining (built from settings if None)
            kernel_writer: Writer for kernel settings (plain file writes if None)
        """
        self.settings = settings or Settings.from_env()
        self.executor = executor or SubprocessExecutor()
        self.resolver = resolver or PhonebookResolver(
            timeout=self.settings.query_timeout,
            grace_period=self.settings.grace_period,
            path=self.settings.phonebook_path,
        )
        self.kernel_writer = kernel_writer
        self.state = InterfaceState.ABSENT

    def interface_name(self, network: Network) -> str:
        return interface_name(
            network.name,
            prefix=self.settings.interface_prefix,
            length=self.settings.interface_name_length,
        )

    def _privileged(self, *args: str) -> List[str]:
        argv = list(args)
        if self.settings.use_sudo:
            argv.insert(0, "sudo")
        return argv

    def _run(self, step: Step) -> None:
        logger.info(step.description)
        self.executor.run(step.argv)
        if step.reaches is not None:
            self.state = step.reaches

    def _apply(self, setting: KernelSetting, enabled: bool) -> None:
        if self.kernel_writer is None:
            apply_setting(setting, enabled)
        else:
            apply_setting(setting, enabled, writer=self.kernel_writer)

    def interface_steps(self, network: Network) -> List[Step]:
        """Commands creating, addressing and routing the interface."""
        iface = self.interface_name(network)
        address = ipaddress.ip_address(network.user.vpn_ip)
        family = f"-{address.version}"
        subnet_family = f"-{ipaddress.ip_network(network.subnet, strict=False).version}"

        return [
            Step(
                f"Creating interface {iface}",
                self._privileged("ip", "link", "add", iface, "type", "wireguard"),
                InterfaceState.CREATED,
            ),
            Step(
                f"Assigning {network.user.vpn_ip} to {iface}",
                self._privileged(
                    "ip", family, "address", "add",
                    f"{address}/{address.max_prefixlen}", "dev", iface
                ),
                InterfaceState.ADDRESSED,
            ),
            Step(
                f"Setting MTU {self.settings.mtu} on {iface}",
                self._privileged("ip", "link", "set", "mtu", str(self.settings.mtu), "dev", iface),
            ),
            Step(
                f"Bringing {iface} up",
                self._privileged("ip", "link", "set", "up", "dev", iface),
            ),
            Step(
                f"Routing {network.subnet} via {iface}",
                self._privileged("ip", subnet_family, "route", "add", network.subnet, "dev", iface),
                InterfaceState.ROUTED,
            ),
        ]

    def _write_conf(self, filename: str, text: str) -> Path:
        path = Path(self.settings.conf_dir) / filename
        create_private_file(path, text)
        logger.debug(f"Wrote {path}")
        return path

    def start(
        self,
        network: Network,
        private_id: PrivateId,
        server: bool = False,
        phonebook: Optional[Phonebook] = None
    ) -> Phonebook:
        """
        Start a Tulip network.

        In server mode the phonebook must be supplied and the local user
        must have a listen port. Otherwise the phonebook is fetched from the
        bootstrap peers once the bootstrap config is installed.

        Args:
            network: Network to start
            private_id: Local private ID
            server: Run as a bootstrap peer
            phonebook: Trusted phonebook (required in server mode)

        Returns:
            The phonebook that was installed

        Raises:
            ServerModeRequiresPort before any command runs if server mode
                preconditions are not met
            ExternalCommandFailed if a command fails
            AllBootstrapPeersUnreachable if no bootstrap peer answers
        """
        if server and (network.user.port is None or phonebook is None):
            raise ServerModeRequiresPort(
                "server mode requires a listen port for the user and a phonebook"
            )

        iface = self.interface_name(network)
        logger.info(f"Starting network {network.name} on {iface} ({'server' if server else 'join'} mode)")

        if server and self.settings.enable_forwarding:
            self._apply(KernelSetting.IPV4_FORWARDING, True)
            self._apply(KernelSetting.IPV6_FORWARDING, True)

        for step in self.interface_steps(network):
            self._run(step)

        conf = render_network_conf(network, private_id, mobile=False, port=network.user.port)
        conf_path = self._write_conf(f"{iface}.conf", conf)
        self._run(Step(
            f"Installing bootstrap peers on {iface}",
            self._privileged("wg", "setconf", iface, str(conf_path)),
            InterfaceState.BOOTSTRAP_CONFIGURED,
        ))

        if phonebook is None:
            phonebook = self.resolver.join(network.public_endpoints)

        peers_conf = render_phonebook_conf(phonebook, network)
        peers_path = self._write_conf(f"{iface}_phonebook.conf", peers_conf)
        self._run(Step(
            f"Installing phonebook peers on {iface}",
            self._privileged("wg", "addconf", iface, str(peers_path)),
            InterfaceState.CONFIGURED,
        ))

        logger.info(f"Network {network.name} is up with {len(phonebook)} phonebook entries")
        return phonebook

    def stop(self, network: Network) -> None:
        """
        Stop a Tulip network by deleting its interface.

        Deleting an interface that does not exist is not an error.
        """
        iface = self.interface_name(network)
        logger.info(f"Deleting interface {iface}")
        result = self.executor.run(self._privileged("ip", "link", "delete", "dev", iface), check=False)
        if not result.ok:
            logger.info(f"Deleting {iface} exited with status {result.returncode}: {result.stderr.strip()}")
        self.state = InterfaceState.ABSENT

    def set_debug(self, enabled: bool) -> None:
        """Turn WireGuard kernel debug logging on or off."""
        self._apply(KernelSetting.WIREGUARD_DEBUG, enabled)
