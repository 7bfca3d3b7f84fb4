"""Shared utility functions for upstage."""

import os

TEMPLATE_FILE_NAME = "compiled-cloudformation-template.json"


def base_name(path: str) -> str:
    """Return the final path component, ignoring trailing separators."""
    return os.path.basename(os.path.normpath(path))


def object_key(artifact_directory: str, file_name: str) -> str:
    """Join an artifact directory and a file name into an S3 key."""
    directory = artifact_directory.strip("/")
    if not directory:
        return file_name
    return f"{directory}/{file_name}"


def format_kilobytes(size: int) -> str:
    """Format a byte count as whole kilobytes, rounding halves up.

    e.g. 1024 -> '1 KB', 2560 -> '3 KB'.
    """
    return f"{(size + 512) // 1024} KB"
