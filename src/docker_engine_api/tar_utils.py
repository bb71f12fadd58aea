"""
TAR Archive utilities for build contexts and archive uploads
"""

import io
import os
import tarfile
from typing import Optional


def create_tar_from_file(file_path: str, arcname: Optional[str] = None) -> bytes:
    """
    Create tar archive from a single file

    Args:
        file_path: Path to file to archive
        arcname: Name of file in archive (default: basename of file_path)

    Returns:
        Tar archive as bytes
    """
    if arcname is None:
        arcname = os.path.basename(file_path)

    tar_stream = io.BytesIO()

    with tarfile.open(fileobj=tar_stream, mode='w') as tar:
        tar.add(file_path, arcname=arcname)

    return tar_stream.getvalue()


def create_build_context(path: str) -> bytes:
    """
    Create tar archive of a build context directory

    Files are stored relative to path, so the Dockerfile sits at the archive root.

    Args:
        path: Build context directory

    Returns:
        Tar archive as bytes
    """
    tar_stream = io.BytesIO()

    with tarfile.open(fileobj=tar_stream, mode='w') as tar:
        for root, dirs, files in os.walk(path):
            dirs.sort()
            for file in sorted(files):
                file_path = os.path.join(root, file)
                arcname = os.path.relpath(file_path, path)
                tar.add(file_path, arcname=arcname)

    return tar_stream.getvalue()


def load_build_context(context) -> bytes:
    """
    Tar bytes for POST /build

    Args:
        context: Tar bytes, a tar file path, a directory, or a lone Dockerfile path

    Returns:
        Tar archive as bytes
    """
    if isinstance(context, (bytes, bytearray)):
        return bytes(context)

    if os.path.isdir(context):
        return create_build_context(context)

    if tarfile.is_tarfile(context):
        with open(context, 'rb') as f:
            return f.read()

    return create_tar_from_file(context, arcname='Dockerfile')
