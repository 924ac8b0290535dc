"""Tulip ID generation and storage."""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .. import config
from ..errors import (
    IdentityAlreadyExists,
    IdentityNotFound,
    InvalidIdentity,
    MalformedIdentity,
    TulipIOError,
)
from ..models import PublicId, PrivateId
from ..system import create_private_file
from .keys import KeySource, generate_keypair

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
M = TypeVar("M", bound=BaseModel)


def generate_id(name: str, source: Optional[KeySource] = None) -> Tuple[PublicId, PrivateId]:
    """
    Generate a Tulip ID.

    Args:
        name: Nickname of the ID owner
        source: Key source (defaults to wg(8))

    Returns:
        Tuple of (public ID, private ID)

    Raises:
        InvalidIdentity if name cannot be used as a file name
        KeyGenerationFailed if the key source fails
    """
    keypair = generate_keypair(source)
    try:
        return (
            PublicId(name=name, public_key=keypair.public_key),
            PrivateId(name=name, private_key=keypair.private_key),
        )
    except ValidationError as e:
        raise InvalidIdentity(f"invalid ID name {name!r}: {e.errors()[0]['msg']}") from e


def id_file_paths(out_dir: PathLike, name: str) -> Tuple[Path, Path]:
    """Return (public path, private path) for an ID named name."""
    out_dir = Path(out_dir)
    return (
        out_dir / f"{name}{config.PUBLIC_ID_SUFFIX}",
        out_dir / f"{name}{config.PRIVATE_ID_SUFFIX}",
    )


def save_id(out_dir: PathLike, public_id: PublicId, private_id: PrivateId) -> Tuple[Path, Path]:
    """
    Write ID files with 0600 permissions.

    Existing ID files are never overwritten: if either file exists nothing
    is written.

    Args:
        out_dir: Output directory
        public_id: Public ID
        private_id: Private ID

    Returns:
        Tuple of (public path, private path)

    Raises:
        InvalidIdentity if the two halves carry different names
        IdentityAlreadyExists if either file exists
    """
    if public_id.name != private_id.name:
        raise InvalidIdentity(
            f"public ID name {public_id.name!r} does not match private ID name {private_id.name!r}"
        )
    public_path, private_path = id_file_paths(out_dir, private_id.name)

    for path in (public_path, private_path):
        if path.exists():
            raise IdentityAlreadyExists(
                f"will not overwrite existing ID file {path}", path=str(path)
            )

    written = []
    try:
        for path, model in ((public_path, public_id), (private_path, private_id)):
            logger.info(f"Writing ID file {path}")
            create_private_file(path, json.dumps(model.model_dump(), indent=2) + "\n", exclusive=True)
            written.append(path)
    except FileExistsError as e:
        # Lost a race with another writer; remove only what this call created
        for path in written:
            path.unlink()
        raise IdentityAlreadyExists(
            f"will not overwrite existing ID file {e.filename}", path=e.filename
        ) from e
    except OSError as e:
        raise TulipIOError(f"could not write ID file: {e}") from e

    return public_path, private_path


def _read_model(path: PathLike, model: Type[M]) -> M:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise IdentityNotFound(str(path))
    except UnicodeDecodeError as e:
        raise MalformedIdentity(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise TulipIOError(f"could not read ID file {path}: {e}") from e

    try:
        return model(**json.loads(text))
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        raise MalformedIdentity(f"{path} is not a valid {model.__name__}: {e}") from e


def load_private_id(path: PathLike) -> PrivateId:
    """
    Load a private ID file.

    Raises:
        IdentityNotFound if the file is missing
        MalformedIdentity if it does not match the schema
    """
    return _read_model(path, PrivateId)


def load_public_id(path: PathLike) -> PublicId:
    """Load a public ID file."""
    return _read_model(path, PublicId)
