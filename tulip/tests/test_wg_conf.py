"""Tests for WireGuard config rendering."""

from tulip.models import Network, PrivateId
from tulip.network import parse_phonebook
from tulip.network.wg_conf import (
    host_route,
    interface_name,
    phonebook_peers,
    render_network_conf,
    render_phonebook_conf,
    render_private_peer,
    render_user_conf,
)


def _sections(conf):
    return [s for s in conf.strip().split("\n\n") if s]


def test_mobile_config(network, private_id):
    """Test a mobile config: own address plus one bootstrap peer."""
    conf = render_network_conf(network, private_id, mobile=True)
    interface, *peers = _sections(conf)

    assert interface.splitlines() == [
        "[Interface]",
        f"PrivateKey = {private_id.private_key}",
        "Address = 10.8.0.5/32",
    ]
    assert len(peers) == 1
    assert peers[0].splitlines() == [
        "# hq",
        "[Peer]",
        "PublicKey = K1",
        "AllowedIPs = 10.8.0.0/24",
        "Endpoint = hq.example.com:51820",
    ]
    assert conf.count("[Peer]") == 1


def test_server_config_has_no_address(server_network, private_id):
    """Test that a non-mobile config never carries an address."""
    conf = render_network_conf(server_network, private_id, mobile=False, port=server_network.user.port)

    assert "Address" not in conf
    assert "ListenPort = 51820" in conf


def test_listen_port_only_when_given(network, private_id):
    """Test the optional listen port line."""
    assert "ListenPort" not in render_network_conf(network, private_id)
    assert "ListenPort = 4000" in render_network_conf(network, private_id, port=4000)


def test_bootstrap_peers_in_order(two_peer_network, private_id):
    """Test that every bootstrap peer gets a subnet-routed section, in order."""
    conf = render_network_conf(two_peer_network, private_id)
    peers = _sections(conf)[1:]

    assert [p.splitlines()[0] for p in peers] == ["# hq", "# branch"]
    for peer in peers:
        assert "AllowedIPs = 10.8.0.0/24" in peer
    assert "Endpoint = branch.example.com:51821" in peers[1]


def test_phonebook_config(phonebook):
    """Test that a phonebook peer gets a host route and no endpoint."""
    conf = render_phonebook_conf(phonebook)

    assert _sections(conf) == ["# carol\n[Peer]\nPublicKey = K2\nAllowedIPs = 10.8.0.9/32"]
    assert "Endpoint" not in conf


def test_phonebook_config_keeps_insertion_order():
    """Test phonebook sections follow the mapping's order."""
    phonebook = parse_phonebook({
        "zed": {"name": "zed", "vpn_ip": "10.8.0.20", "public_key": "KZ"},
        "amy": {"name": "amy", "vpn_ip": "10.8.0.21", "public_key": "KA"},
    })
    sections = _sections(render_phonebook_conf(phonebook))
    assert [s.splitlines()[0] for s in sections] == ["# zed", "# amy"]


def test_empty_phonebook_renders_nothing():
    """Test that an empty phonebook gives an empty config."""
    assert render_phonebook_conf({}) == ""


def test_bootstrap_identity_wins(network, phonebook_data):
    """Test that phonebook entries clashing with bootstrap peers are skipped."""
    phonebook_data["hq"] = {"name": "hq", "vpn_ip": "10.8.0.1", "public_key": "K1"}
    phonebook_data["hq-alias"] = {"name": "hq-alias", "vpn_ip": "10.8.0.30", "public_key": "K1"}
    phonebook_data["bob"] = {"name": "bob", "vpn_ip": "10.8.0.5", "public_key": "KB"}
    phonebook = parse_phonebook(phonebook_data)

    assert [p.name for p in phonebook_peers(phonebook, network)] == ["carol"]
    assert [p.name for p in phonebook_peers(phonebook)] == ["carol", "hq", "hq-alias", "bob"]


def test_rendering_is_deterministic(network, private_id, phonebook):
    """Test that identical inputs produce identical text."""
    first = render_user_conf(network, private_id, phonebook)
    second = render_user_conf(network, private_id, phonebook)
    assert first == second
    assert render_network_conf(network, private_id) == render_network_conf(network, private_id)


def test_user_config(network, private_id, phonebook):
    """Test the complete exported config."""
    conf = render_user_conf(network, private_id, phonebook)
    sections = _sections(conf)

    assert "Address = 10.8.0.5/32" in sections[0]
    assert len(sections) == 3
    assert "AllowedIPs = 10.8.0.0/24" in sections[1]
    assert "AllowedIPs = 10.8.0.9/32" in sections[2]
    assert conf.endswith("\n")


def test_ipv6_routes_and_endpoints():
    """Test IPv6 host routes and bracketed endpoints."""
    network = Network(
        name="v6net",
        subnet="fd00::/64",
        user={"name": "bob", "vpn_ip": "fd00::5"},
        public_endpoints=[{
            "name": "hq", "vpn_ip": "fd00::1", "public_hostname": "2001:db8::1",
            "public_key": "K1", "port": 51820,
        }],
    )
    conf = render_network_conf(network, PrivateId(name="bob", private_key="P"), mobile=True)

    assert "Address = fd00::5/128" in conf
    assert "Endpoint = [2001:db8::1]:51820" in conf
    assert host_route("10.8.0.9") == "10.8.0.9/32"


def test_private_peer_section(phonebook):
    """Test a single phonebook peer section."""
    assert render_private_peer(phonebook["carol"]).startswith("# carol\n[Peer]\n")


def test_interface_name_is_stable():
    """Test interface name derivation."""
    assert interface_name("acme") == "tulip_acme"
    assert interface_name("0123456789abcdef") == "tulip_01234567"
    assert interface_name("0123456789abcdef") == interface_name("0123456789abcdef")
    assert len(interface_name("x" * 64)) <= 15
