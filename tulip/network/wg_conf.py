"""
Rendering WireGuard configuration text.

Everything here is pure: the same inputs always give the same text.

A configuration is an [Interface] section followed by [Peer] sections,
separated by blank lines. Bootstrap peers are routed the whole mesh subnet
and get an Endpoint; phonebook peers only get a host route, since they
are reached through the mesh.
"""

import ipaddress
from typing import List, Optional

from .. import config
from ..models import Network, Phonebook, PrivateEndpoint, PrivateId, PublicEndpoint


def interface_name(
    network_name: str,
    prefix: str = config.INTERFACE_PREFIX,
    length: int = config.INTERFACE_NAME_LENGTH
) -> str:
    """
    Name of the WireGuard interface for a network.

    A fixed-length prefix of the network name keeps the result within the
    kernel's 15 character limit.
    """
    return f"{prefix}{network_name[:length]}"


def host_route(vpn_ip: str) -> str:
    """Single-host CIDR for an address (/32 for IPv4, /128 for IPv6)."""
    address = ipaddress.ip_address(vpn_ip)
    return f"{address}/{address.max_prefixlen}"


def format_endpoint(hostname: str, port: int) -> str:
    if ":" in hostname and not hostname.startswith("["):
        return f"[{hostname}]:{port}"
    return f"{hostname}:{port}"


def render_interface(private_id: PrivateId, address: Optional[str] = None, port: Optional[int] = None) -> str:
    """
    Render the [Interface] section.

    Args:
        private_id: ID holding the interface's private key
        address: CIDR address line, only for configs that carry their own address
        port: Listen port
    """
    lines = ["[Interface]", f"PrivateKey = {private_id.private_key}"]
    if address is not None:
        lines.append(f"Address = {address}")
    if port is not None:
        lines.append(f"ListenPort = {port}")
    return "\n".join(lines)


def render_public_peer(endpoint: PublicEndpoint, subnet: str) -> str:
    """Render a bootstrap peer, routed the whole mesh subnet."""
    return "\n".join([
        f"# {endpoint.name}",
        "[Peer]",
        f"PublicKey = {endpoint.public_key}",
        f"AllowedIPs = {subnet}",
        f"Endpoint = {format_endpoint(endpoint.public_hostname, endpoint.port)}",
    ])


def render_private_peer(endpoint: PrivateEndpoint) -> str:
    """Render a phonebook peer, routed as a single host."""
    return "\n".join([
        f"# {endpoint.name}",
        "[Peer]",
        f"PublicKey = {endpoint.public_key}",
        f"AllowedIPs = {host_route(endpoint.vpn_ip)}",
    ])


def _join(sections: List[str]) -> str:
    if not sections:
        return ""
    return "\n\n".join(sections) + "\n"


def render_network_conf(
    network: Network,
    private_id: PrivateId,
    mobile: bool = False,
    port: Optional[int] = None
) -> str:
    """
    Render the interface and bootstrap peer sections for a network.

    Args:
        network: The network
        private_id: Local private ID
        mobile: Include the local address in the config. Interfaces set up by
            start() get their address from ip(8) instead.
        port: Listen port, if the local user is a bootstrap peer
    """
    address = host_route(network.user.vpn_ip) if mobile else None
    sections = [render_interface(private_id, address=address, port=port)]
    sections.extend(render_public_peer(ep, network.subnet) for ep in network.public_endpoints)
    return _join(sections)


def phonebook_peers(phonebook: Phonebook, network: Optional[Network] = None) -> List[PrivateEndpoint]:
    """
    Phonebook entries to configure as peers, in phonebook order.

    With a network, entries that clash with a bootstrap peer (same name or
    public key) are left out, since the bootstrap entry already configures
    that peer, and so is the local user's own entry.
    """
    if network is None:
        return list(phonebook.values())

    names = {ep.name for ep in network.public_endpoints}
    keys = {ep.public_key for ep in network.public_endpoints}
    names.add(network.user.name)

    return [
        entry for key, entry in phonebook.items()
        if key not in names and entry.name not in names and entry.public_key not in keys
    ]


def render_phonebook_conf(phonebook: Phonebook, network: Optional[Network] = None) -> str:
    """Render one peer section per phonebook entry."""
    return _join([render_private_peer(entry) for entry in phonebook_peers(phonebook, network)])


def render_user_conf(network: Network, private_id: PrivateId, phonebook: Phonebook) -> str:
    """
    Render a complete, self-contained config for a mobile device or wg-quick.

    The result carries the local address and every peer.
    """
    conf = render_network_conf(network, private_id, mobile=True, port=network.user.port)
    peers = render_phonebook_conf(phonebook, network)
    if peers:
        conf = conf + "\n" + peers
    return conf
