"""
Configuration for Tulip.

Defaults live here as module constants; a Settings instance can be built
from the environment (TULIP_* variables) and is passed to the components
that need it.
"""

import os
import tempfile
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from .errors import ConfigurationError


# ---------------- Phonebook ----------------

PHONEBOOK_PATH = "/phonebook.json"
QUERY_TIMEOUT = 3.0  # Seconds per bootstrap peer
GRACE_PERIOD = 3  # Seconds to wait for a new interface to become routable

# ---------------- Interface ----------------

INTERFACE_PREFIX = "tulip_"
INTERFACE_NAME_LENGTH = 8  # Characters of the network name (IFNAMSIZ is 16)
MTU = 1420

# ---------------- Files ----------------

PUBLIC_ID_SUFFIX = "_public_id.json"
PRIVATE_ID_SUFFIX = "_private_id.json"
NETWORK_FILE_SUFFIX = "_tulip_network.json"
CONF_SUFFIX = "_tulip_network.conf"
QR_SUFFIX = "_tulip_network.svg"

ENV_PREFIX = "TULIP_"


class Settings(BaseModel):
    """Tunables for one invocation."""
    query_timeout: float = Field(default=QUERY_TIMEOUT, gt=0, description="Phonebook query timeout (s)")
    grace_period: float = Field(default=GRACE_PERIOD, ge=0, description="Delay before the joiner scan (s)")
    mtu: int = Field(default=MTU, ge=576, le=9000)
    interface_prefix: str = Field(default=INTERFACE_PREFIX)
    interface_name_length: int = Field(default=INTERFACE_NAME_LENGTH, ge=1, le=15)
    conf_dir: str = Field(default_factory=tempfile.gettempdir, description="Directory for rendered configs")
    phonebook_path: str = Field(default=PHONEBOOK_PATH)
    use_sudo: bool = Field(default=True, description="Prefix ip/wg commands with sudo")
    enable_forwarding: bool = Field(default=True, description="Turn on IP forwarding in server mode")

    @model_validator(mode="after")
    def _check_interface_name(self) -> "Settings":
        # Linux interface names are at most 15 characters
        if len(self.interface_prefix) + self.interface_name_length > 15:
            raise ValueError(
                f"interface_prefix ({self.interface_prefix!r}) plus interface_name_length "
                f"({self.interface_name_length}) exceeds 15 characters"
            )
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "Settings":
        """
        Build settings from TULIP_* environment variables.

        Args:
            environ: Mapping to read (defaults to os.environ)
            **overrides: Values that take precedence over the environment

        Returns:
            Validated Settings

        Raises:
            ConfigurationError if a value does not validate
        """
        if environ is None:
            environ = os.environ

        values = {}
        for field_name in cls.model_fields:
            key = ENV_PREFIX + field_name.upper()
            if key in environ:
                values[field_name] = environ[key]

        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"invalid settings: {e}") from e
