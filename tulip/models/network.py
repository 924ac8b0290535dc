"""
Network topology and phonebook models.

There are three kinds of endpoint in a Tulip network:
- PublicEndpoint: a member whose WireGuard interface is reachable from the
  public Internet. These are the bootstrap peers listed in the network file.
- PrivateEndpoint: a member only known through the network's phonebook.
- UserEndpoint: the local user joining the network.
"""

import ipaddress
import json
import re
from typing import Annotated, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, Field, TypeAdapter, field_validator


_NETWORK_NAME = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_ip(value: str) -> str:
    ipaddress.ip_address(value)
    return value


IPAddress = Annotated[str, AfterValidator(_check_ip)]


class PublicEndpoint(BaseModel):
    """A bootstrap peer reachable from the open network."""
    name: str = Field(..., min_length=1)
    vpn_ip: IPAddress = Field(..., description="Address inside the mesh")
    public_hostname: str = Field(..., min_length=1, description="Public DNS name or IP")
    public_key: str = Field(..., min_length=1, description="WireGuard public key (base64)")
    port: int = Field(..., strict=True, ge=1, le=65535, description="WireGuard listen port")

    model_config = {"frozen": True}


class PrivateEndpoint(BaseModel):
    """A peer reachable only inside the mesh."""
    name: str = Field(..., min_length=1)
    vpn_ip: IPAddress = Field(..., description="Address inside the mesh")
    public_key: str = Field(..., min_length=1, description="WireGuard public key (base64)")


class UserEndpoint(BaseModel):
    """The local user. port is only set when the user is itself a bootstrap peer."""
    name: str = Field(..., min_length=1)
    vpn_ip: IPAddress = Field(..., description="Address inside the mesh")
    port: Optional[int] = Field(None, strict=True, ge=1, le=65535, description="Listen port (server role)")


class Network(BaseModel):
    """
    A Tulip network - the contents of tulip_network.json.

    The order of public_endpoints is the order in which bootstrap peers are
    asked for the phonebook.
    """
    name: str = Field(..., min_length=1, description="Network identifier")
    subnet: str = Field(..., description="Mesh subnet in CIDR notation")
    user: UserEndpoint = Field(..., description="The local user")
    public_endpoints: List[PublicEndpoint] = Field(
        default_factory=list,
        description="Bootstrap peers in priority order"
    )

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not _NETWORK_NAME.match(value):
            raise ValueError("network name may only contain letters, digits, '_', '-' and '.'")
        return value

    @field_validator("subnet")
    @classmethod
    def _check_subnet(cls, value: str) -> str:
        if "/" not in value:
            raise ValueError("subnet must be in CIDR notation")
        ipaddress.ip_network(value, strict=False)
        return value

    def to_json(self) -> str:
        """Pretty-printed JSON in the on-disk layout."""
        return json.dumps(self.model_dump(mode='json'), indent=2)


Phonebook = Dict[str, PrivateEndpoint]

PhonebookAdapter = TypeAdapter(Phonebook)
