"""Key generation and Tulip IDs."""

from .keys import KeyPair, KeySource, WgKeySource, NaclKeySource, generate_keypair, check_key
from .identity import generate_id, save_id, load_private_id, load_public_id, id_file_paths

__all__ = [
    "KeyPair",
    "KeySource",
    "WgKeySource",
    "NaclKeySource",
    "generate_keypair",
    "check_key",
    "generate_id",
    "save_id",
    "load_private_id",
    "load_public_id",
    "id_file_paths",
]
