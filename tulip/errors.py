"""
Exceptions for Tulip.

Every failure is raised as a subclass of TulipError and carries enough
context (path, peer, command) to diagnose it. Nothing below the CLI
catches these.
"""

from typing import Optional, Sequence


class TulipError(Exception):
    """Base exception for all Tulip errors."""
    pass


# ---------------- Categories ----------------

class TulipIOError(TulipError):
    """File or network I/O failed."""
    pass


class ParseError(TulipError):
    """Malformed JSON or schema mismatch."""
    pass


class PreconditionUnmet(TulipError):
    """The request cannot be served with the inputs given."""
    pass


class AlreadyExists(TulipError):
    """Refusing to overwrite an existing file."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ExternalCommandFailed(TulipError):
    """An external command could not be spawned or exited non-zero."""

    def __init__(self, argv: Sequence[str], returncode: Optional[int] = None, stderr: str = ""):
        cmd = " ".join(argv)
        if returncode is None:
            message = f"could not run '{cmd}'"
        else:
            message = f"'{cmd}' exited with status {returncode}"
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr


class AllBootstrapPeersUnreachable(TulipError):
    """No bootstrap peer returned a usable phonebook."""

    def __init__(self, failures: Optional[dict] = None):
        failures = failures or {}
        if failures:
            detail = "; ".join(f"{name}: {reason}" for name, reason in failures.items())
            message = f"all phonebook queries failed ({detail})"
        else:
            message = "all phonebook queries failed (no bootstrap peers configured)"
        super().__init__(message)
        self.failures = failures


# ---------------- Identity ----------------

class KeyGenerationFailed(TulipError):
    """The key source failed or returned malformed key material."""
    pass


class IdentityAlreadyExists(AlreadyExists):
    """An ID file already exists at the target path."""
    pass


class IdentityNotFound(TulipIOError):
    """The ID file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"ID file not found: {path}")
        self.path = path


class MalformedIdentity(ParseError):
    """The ID file is not a valid Tulip ID."""
    pass


class InvalidIdentity(PreconditionUnmet):
    """The ID name is unusable, or the public and private halves do not belong together."""
    pass


# ---------------- Topology / phonebook ----------------

class TopologyNotFound(TulipIOError):
    """The network file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"network file not found: {path}")
        self.path = path


class MalformedTopology(ParseError):
    """The network file failed validation."""
    pass


class NetworkFileExists(AlreadyExists):
    """A per-user network file already exists at the target path."""
    pass


class PhonebookReadFailed(TulipIOError):
    """The phonebook file could not be read or parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"could not read phonebook {path}: {reason}")
        self.path = path
        self.reason = reason


class UnknownPeer(PreconditionUnmet):
    """A name was looked up in the phonebook and is not there."""

    def __init__(self, name: str):
        super().__init__(f"{name} is not a user of this network")
        self.name = name


# ---------------- Lifecycle ----------------

class ServerModeRequiresPort(PreconditionUnmet):
    """Server mode needs a listen port and a phonebook file."""
    pass


# ---------------- Configuration ----------------

class ConfigurationError(TulipError):
    """A TULIP_* setting has an invalid value."""
    pass
