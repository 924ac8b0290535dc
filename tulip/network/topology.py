"""Reading network files and deriving per-user network files."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .. import config
from ..errors import (
    MalformedTopology,
    NetworkFileExists,
    TopologyNotFound,
    TulipIOError,
    UnknownPeer,
)
from ..models import Network, Phonebook, UserEndpoint
from ..system import create_private_file

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_network(path: PathLike) -> Network:
    """
    Load and validate a tulip_network.json file.

    Raises:
        TopologyNotFound if the file is missing
        MalformedTopology on invalid JSON or schema violations
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise TopologyNotFound(str(path))
    except UnicodeDecodeError as e:
        raise MalformedTopology(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise TulipIOError(f"could not read network file {path}: {e}") from e

    try:
        return Network(**json.loads(text))
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        raise MalformedTopology(f"{path} is not a valid network file: {e}") from e


def with_user(network: Network, phonebook: Phonebook, name: str, port: Optional[int] = None) -> Network:
    """
    Return a copy of network whose local user is the phonebook entry name.

    The new user listens on port (none for a joiner); the input is not
    modified.

    Raises:
        UnknownPeer if name is not in the phonebook
    """
    entry = phonebook.get(name)
    if entry is None:
        raise UnknownPeer(name)

    user = UserEndpoint(name=name, vpn_ip=entry.vpn_ip, port=port)
    return network.model_copy(update={"user": user})


def write_user_network(out_dir: PathLike, network: Network) -> Path:
    """
    Write network as {user}_tulip_network.json in out_dir.

    Raises:
        NetworkFileExists if the target already exists
    """
    path = Path(out_dir) / f"{network.user.name}{config.NETWORK_FILE_SUFFIX}"
    try:
        create_private_file(path, network.to_json() + "\n", exclusive=True)
    except FileExistsError:
        raise NetworkFileExists(f"will not overwrite existing network file {path}", path=str(path))
    except OSError as e:
        raise TulipIOError(f"could not write network file {path}: {e}") from e

    logger.info(f"Wrote network file for {network.user.name}: {path}")
    return path


def add_user(out_dir: PathLike, name: str, network: Network, phonebook: Phonebook) -> Path:
    """
    Create the network file for a user listed in the admin's phonebook.

    Args:
        out_dir: Output directory for the user's network file
        name: Name of the user (a phonebook key)
        network: The admin's network
        phonebook: The admin's phonebook

    Returns:
        Path of the new network file
    """
    return write_user_network(out_dir, with_user(network, phonebook, name))
