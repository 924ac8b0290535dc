"""WireGuard key generation."""

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Optional

import nacl.public
import nacl.encoding

from ..errors import KeyGenerationFailed, ExternalCommandFailed
from ..system import CommandExecutor, SubprocessExecutor

logger = logging.getLogger(__name__)

KEY_LENGTH = 32  # Curve25519 key size in bytes


def check_key(key: str) -> str:
    """
    Validate a base64 WireGuard key.

    Args:
        key: Candidate key, surrounding whitespace allowed

    Returns:
        The stripped key

    Raises:
        KeyGenerationFailed if the key is not base64 of 32 bytes
    """
    key = key.strip()
    try:
        raw = base64.b64decode(key, validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeyGenerationFailed(f"malformed key material: {e}") from e
    if len(raw) != KEY_LENGTH:
        raise KeyGenerationFailed(f"malformed key material: expected {KEY_LENGTH} bytes, got {len(raw)}")
    return key


class KeySource:
    """Produces WireGuard private keys and derives their public keys."""

    def generate_secret(self) -> str:
        raise NotImplementedError

    def derive_public(self, secret: str) -> str:
        raise NotImplementedError


class WgKeySource(KeySource):
    """Key source that shells out to wg(8)."""

    def __init__(self, executor: Optional[CommandExecutor] = None):
        self.executor = executor or SubprocessExecutor()

    def generate_secret(self) -> str:
        try:
            out = self.executor.run(["wg", "genkey"]).stdout
        except ExternalCommandFailed as e:
            raise KeyGenerationFailed(f"wg genkey failed: {e}") from e
        return check_key(out)

    def derive_public(self, secret: str) -> str:
        # pubkey reads the private key on stdin
        try:
            out = self.executor.run(["wg", "pubkey"], input=secret + "\n").stdout
        except ExternalCommandFailed as e:
            raise KeyGenerationFailed(f"wg pubkey failed: {e}") from e
        return check_key(out)


class NaclKeySource(KeySource):
    """In-process key source; WireGuard keys are plain X25519 keys."""

    def generate_secret(self) -> str:
        private_key = nacl.public.PrivateKey.generate()
        return private_key.encode(encoder=nacl.encoding.Base64Encoder).decode('utf-8')

    def derive_public(self, secret: str) -> str:
        raw = base64.b64decode(check_key(secret))
        public_key = nacl.public.PrivateKey(raw).public_key
        return base64.b64encode(bytes(public_key)).decode('utf-8')


@dataclass
class KeyPair:
    """A WireGuard key pair as base64 strings."""
    private_key: str
    public_key: str


def generate_keypair(source: Optional[KeySource] = None) -> KeyPair:
    """
    Generate a new WireGuard key pair.

    Args:
        source: Key source (defaults to wg(8))

    Returns:
        KeyPair: New key pair
    """
    source = source or WgKeySource()
    private_key = check_key(source.generate_secret())
    public_key = check_key(source.derive_public(private_key))
    return KeyPair(private_key=private_key, public_key=public_key)
