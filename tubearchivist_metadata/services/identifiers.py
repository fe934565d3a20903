"""Recover TubeArchivist video and channel ids from local file paths."""

from __future__ import annotations

import os
import re

VIDEO_ID_LENGTH = 11
CHANNEL_ID_PREFIX = "UC"

_FILENAME_SPLIT_RE = re.compile(r"[_\-\[\]]")
_PATH_SEPARATOR_RE = re.compile(r"[\\/]")


def _last_segment(path: str) -> str:
    # Host paths may come from Windows or POSIX servers.
    return _PATH_SEPARATOR_RE.split(path)[-1]


def is_valid_video_id(value: str | None) -> bool:
    """Return True for 11-character tokens made of letters, digits, `-` and `_`."""

    if not value or len(value) != VIDEO_ID_LENGTH:
        return False
    return all(char.isalnum() or char in "-_" for char in value)


def extract_video_id(known_id: str | None, path: str | None) -> str | None:
    """Return the bound video id, or guess one from the file name.

    A file named exactly like an id (``dQw4w9WgXcQ.mp4``) is accepted as is.
    Otherwise the name is split on ``_``, ``-``, ``[`` and ``]`` and the first
    fragment that looks like a valid id wins, e.g.
    ``20210704_some-title [dQw4w9WgXcQ].mkv``.
    """

    if known_id:
        return known_id
    if not path:
        return None

    filename, _ = os.path.splitext(_last_segment(path))
    if len(filename) == VIDEO_ID_LENGTH:
        return filename

    for part in _FILENAME_SPLIT_RE.split(filename):
        if len(part) == VIDEO_ID_LENGTH and is_valid_video_id(part):
            return part

    return None


def extract_channel_id(known_id: str | None, path: str | None) -> str | None:
    """Return the bound channel id, or the folder name when it looks like one."""

    if known_id:
        return known_id
    if not path:
        return None

    directory_name = _last_segment(path)
    if directory_name[: len(CHANNEL_ID_PREFIX)].upper() == CHANNEL_ID_PREFIX:
        return directory_name

    return None
