"""Tulip ID models."""

import re

from pydantic import BaseModel, Field, field_validator


_ID_NAME = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_id_name(value: str) -> str:
    # names become file names next to each other in one directory
    if not _ID_NAME.match(value):
        raise ValueError("ID name may only contain letters, digits, '_', '-' and '.'")
    return value


class PublicId(BaseModel):
    """Public half of a Tulip ID, safe to hand to a network admin."""
    name: str = Field(..., min_length=1, description="Nickname of the ID owner")
    public_key: str = Field(..., min_length=1, description="WireGuard public key (base64)")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _check_id_name(value)


class PrivateId(BaseModel):
    """
    Private half of a Tulip ID.

    The public key is always derived from private_key through a key source;
    it is never stored next to it.
    """
    name: str = Field(..., min_length=1, description="Nickname of the ID owner")
    private_key: str = Field(..., min_length=1, description="WireGuard private key (base64)")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _check_id_name(value)
