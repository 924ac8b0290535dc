"""Exporting a user's complete WireGuard config as text or a QR code."""

import logging
from pathlib import Path
from typing import Tuple, Union

import qrcode
import qrcode.image.svg

from .. import config
from ..errors import TulipIOError
from ..models import Network, PrivateId
from ..system import create_private_file
from .phonebook import PhonebookResolver
from .topology import with_user
from .wg_conf import render_user_conf

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def export_user_conf(network: Network, private_id: PrivateId, resolver: PhonebookResolver) -> Tuple[Network, str]:
    """
    Build the config for the owner of private_id.

    The phonebook is queried right away (no grace period: no interface is
    being brought up) and the owner's own entry supplies the local address.

    Returns:
        Tuple of (network with the owner as local user, config text)

    Raises:
        AllBootstrapPeersUnreachable if the phonebook cannot be fetched
        UnknownPeer if the owner is not in the phonebook
    """
    phonebook = resolver.query(network.public_endpoints)
    user_network = with_user(network, phonebook, private_id.name, port=network.user.port)
    return user_network, render_user_conf(user_network, private_id, phonebook)


def render_qr_svg(text: str) -> str:
    """Render text as an SVG QR code."""
    img = qrcode.make(
        text,
        image_factory=qrcode.image.svg.SvgImage,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
    )
    return img.to_string(encoding="unicode")


def write_conf(out_dir: PathLike, name: str, conf: str, kind: str = "wg") -> Path:
    """
    Write an exported config.

    Args:
        out_dir: Output directory
        name: Owner of the config
        conf: Config text
        kind: "wg" for the plain config, "qr" for an SVG QR code

    Returns:
        Path that was written
    """
    if kind == "qr":
        path = Path(out_dir) / f"{name}{config.QR_SUFFIX}"
        content = render_qr_svg(conf)
    elif kind == "wg":
        path = Path(out_dir) / f"{name}{config.CONF_SUFFIX}"
        content = conf
    else:
        raise ValueError(f"unknown config kind: {kind}")

    try:
        create_private_file(path, content)
    except OSError as e:
        raise TulipIOError(f"could not write {path}: {e}") from e

    logger.info(f"Wrote {kind} config to {path}")
    return path
