"""Private file creation."""

import os
from pathlib import Path
from typing import Union


def create_private_file(path: Union[str, Path], content: str, exclusive: bool = False) -> Path:
    """
    Write content to a file readable and writable by its owner only.

    Args:
        path: Destination path
        content: Text to write
        exclusive: Fail with FileExistsError instead of truncating an existing file

    Returns:
        Path that was written
    """
    path = Path(path)
    flags = os.O_WRONLY | os.O_CREAT
    flags |= os.O_EXCL if exclusive else os.O_TRUNC

    fd = os.open(path, flags, 0o600)
    # An existing file keeps its old mode on O_TRUNC
    os.fchmod(fd, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)

    return path
