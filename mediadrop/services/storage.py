"""Naming and writing of upload artifacts.

Artifacts live flat in the upload directory as <uuid4><ext>. The client's
filename is never used.
"""

import os
import uuid


def new_identifier() -> str:
    return str(uuid.uuid4())


def artifact_path(upload_dir: str, identifier: str, ext: str) -> str:
    return os.path.join(upload_dir, identifier + ext)


class CreateFailed(OSError):
    pass


def write_artifact(path: str, data: bytes) -> None:
    """Create `path` (must not exist yet) and write `data` to it.

    Raises CreateFailed if the file cannot be created; any other OSError comes
    from writing or closing.
    """
    try:
        f = open(path, "xb")
    except OSError as exc:
        raise CreateFailed(exc.errno, exc.strerror, path) from exc
    try:
        f.write(data)
        f.flush()
    finally:
        f.close()
