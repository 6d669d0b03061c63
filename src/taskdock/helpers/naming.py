"""Default image and container names."""

from __future__ import annotations

import re

from ..constants import DEV_TAG, FALLBACK_IMAGE_NAME, LATEST_TAG
from ..models import BuildOptions, RunOptions

_INVALID_CHARS = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def get_valid_image_name(name_hint: str) -> str:
    """Strip everything but ASCII letters and digits, then lowercase.

    >>> get_valid_image_name("My App!")
    'myapp'
    """
    return _INVALID_CHARS.sub("", name_hint).lower() or FALLBACK_IMAGE_NAME


def get_default_image_name(name_hint: str, tag: str | None = None) -> str:
    return f"{get_valid_image_name(name_hint)}:{tag or LATEST_TAG}"


def get_default_container_name(name_hint: str, tag: str | None = None) -> str:
    return f"{get_valid_image_name(name_hint)}-{tag or DEV_TAG}"


def infer_image_name(
    run_options: RunOptions | None,
    build_result: BuildOptions | None,
    name_hint: str,
    tag: str | None = None,
) -> str:
    """Pick the image a run task starts.

    Explicit ``dockerRun.image``, then the tag of the bound build task,
    then the default image name for ``name_hint``.
    """
    if run_options is not None and run_options.image:
        return run_options.image
    if build_result is not None and build_result.tag:
        return build_result.tag
    return get_default_image_name(name_hint, tag)
