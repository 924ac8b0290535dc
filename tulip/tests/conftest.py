"""Shared fixtures for Tulip tests."""

import json
from typing import Dict, List, Optional

import pytest
import requests

from tulip.config import Settings
from tulip.models import Network, PrivateId
from tulip.network import PhonebookResolver, parse_phonebook
from tulip.system import CommandExecutor, CommandResult


KEY_A = "YAnz8AAPiE5Lt5N0Eu7Qa3ZqSfRxZ3QqAn7Jb8jlPHM="
KEY_B = "kY7z4H2bTn4QyB6xhPqYk5dAqo3Y/1q0Q0z2o1l3Vn8="


class FakeExecutor(CommandExecutor):
    """Records commands instead of running them."""

    def __init__(self, fail_on: Optional[str] = None, outputs: Optional[Dict[str, str]] = None):
        self.commands: List[List[str]] = []
        self.inputs: List[Optional[str]] = []
        self.fail_on = fail_on
        self.outputs = outputs or {}

    def _execute(self, argv, input):
        self.commands.append(argv)
        self.inputs.append(input)
        joined = " ".join(argv)
        if self.fail_on and self.fail_on in joined:
            return CommandResult(argv=argv, returncode=1, stderr="boom")
        for prefix, out in self.outputs.items():
            if joined.startswith(prefix):
                return CommandResult(argv=argv, returncode=0, stdout=out)
        return CommandResult(argv=argv, returncode=0)


class FakeResponse:
    def __init__(self, body=None, status: int = 200, text: Optional[str] = None):
        self.body = body
        self.status_code = status
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.text is not None:
            return json.loads(self.text)
        return self.body


class FakeSession:
    """Answers GETs from a url -> response (or exception) table."""

    def __init__(self, routes: Dict[str, object]):
        self.routes = routes
        self.requested: List[str] = []
        self.timeouts: List[float] = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        self.timeouts.append(timeout)
        answer = self.routes.get(url, requests.ConnectionError(f"no route to {url}"))
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def network_data():
    return {
        "name": "acme",
        "subnet": "10.8.0.0/24",
        "user": {"name": "bob", "vpn_ip": "10.8.0.5"},
        "public_endpoints": [
            {
                "name": "hq",
                "vpn_ip": "10.8.0.1",
                "public_hostname": "hq.example.com",
                "public_key": "K1",
                "port": 51820,
            }
        ],
    }


@pytest.fixture
def network(network_data):
    return Network(**network_data)


@pytest.fixture
def two_peer_network(network_data):
    network_data["public_endpoints"].append({
        "name": "branch",
        "vpn_ip": "10.8.0.2",
        "public_hostname": "branch.example.com",
        "public_key": "K3",
        "port": 51821,
    })
    return Network(**network_data)


@pytest.fixture
def server_network(network_data):
    network_data["user"] = {"name": "hq", "vpn_ip": "10.8.0.1", "port": 51820}
    return Network(**network_data)


@pytest.fixture
def phonebook_data():
    return {
        "carol": {"name": "carol", "vpn_ip": "10.8.0.9", "public_key": "K2"},
    }


@pytest.fixture
def phonebook(phonebook_data):
    return parse_phonebook(phonebook_data)


@pytest.fixture
def private_id():
    return PrivateId(name="bob", private_key=KEY_A)


@pytest.fixture
def settings(tmp_path):
    return Settings(use_sudo=False, grace_period=0, conf_dir=str(tmp_path))


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def make_executor():
    return FakeExecutor


@pytest.fixture
def make_resolver():
    def _make(session, **kwargs):
        kwargs.setdefault("grace_period", 0)
        return PhonebookResolver(session=session, **kwargs)
    return _make
