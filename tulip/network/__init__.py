"""Network topology, phonebook resolution, config rendering and lifecycle."""

from .topology import load_network, with_user, write_user_network, add_user
from .phonebook import PhonebookResolver, read_phonebook_file, parse_phonebook, phonebook_url
from .wg_conf import (
    interface_name,
    render_network_conf,
    render_phonebook_conf,
    render_user_conf,
)
from .lifecycle import NetworkController, InterfaceState, Step
from .export import export_user_conf, write_conf

__all__ = [
    "load_network",
    "with_user",
    "write_user_network",
    "add_user",
    "PhonebookResolver",
    "read_phonebook_file",
    "parse_phonebook",
    "phonebook_url",
    "interface_name",
    "render_network_conf",
    "render_phonebook_conf",
    "render_user_conf",
    "NetworkController",
    "InterfaceState",
    "Step",
    "export_user_conf",
    "write_conf",
]
