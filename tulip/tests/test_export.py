"""Tests for exporting a user's config."""

import pytest

from tulip.errors import UnknownPeer
from tulip.models import PrivateId
from tulip.network import export_user_conf, write_conf


HQ_URL = "http://10.8.0.1/phonebook.json"


def test_export_user_conf(network, phonebook_data, make_session, make_response, make_resolver):
    """Test that the owner's phonebook entry supplies the address."""
    private_id = PrivateId(name="carol", private_key="PRIV")
    session = make_session({HQ_URL: make_response(phonebook_data)})
    slept = []

    user_network, conf = export_user_conf(
        network, private_id, make_resolver(session, grace_period=3, sleep=slept.append)
    )

    assert slept == []
    assert user_network.user.name == "carol"
    assert "Address = 10.8.0.9/32" in conf
    assert "Endpoint = hq.example.com:51820" in conf
    # Own entry is not a peer
    assert "# carol" not in conf


def test_export_unknown_owner(network, phonebook_data, make_session, make_response, make_resolver):
    """Test exporting for an ID that is not in the phonebook."""
    session = make_session({HQ_URL: make_response(phonebook_data)})
    with pytest.raises(UnknownPeer):
        export_user_conf(network, PrivateId(name="mallory", private_key="PRIV"), make_resolver(session))


def test_write_conf(tmp_path):
    """Test writing text and QR exports."""
    conf = "[Interface]\nPrivateKey = PRIV\n"

    path = write_conf(tmp_path, "carol", conf, kind="wg")
    assert path.name == "carol_tulip_network.conf"
    assert path.read_text() == conf

    path = write_conf(tmp_path, "carol", conf, kind="qr")
    assert path.name == "carol_tulip_network.svg"
    assert "<svg" in path.read_text()

    with pytest.raises(ValueError):
        write_conf(tmp_path, "carol", conf, kind="png")
