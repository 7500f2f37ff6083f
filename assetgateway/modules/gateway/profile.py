"""
Connection profile loading and endpoint host rewriting.

The rewrite is a plain substring replacement of ``localhost`` in each
endpoint URL, not a URL parse. A host such as ``localhost-backup`` would
be rewritten too; deployments control which hostnames appear in the
profile, so this is accepted.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from assetgateway.config import NO_HOST_OVERRIDE

from .errors import ProfileNotFoundError, ProfileParseError

logger = logging.getLogger(__name__)

# Profile sections whose descriptors carry an endpoint url
ENDPOINT_SECTIONS = ("peers", "certificateAuthorities", "orderers")

YAML_SUFFIXES = {".yaml", ".yml"}

LOCALHOST = "localhost"


def load_profile(path: Path) -> Dict[str, Any]:
    """
    Load a network connection profile.

    JSON is the default format; ``.yaml``/``.yml`` files are read as YAML.

    Raises:
        ProfileNotFoundError: If path does not exist
        ProfileParseError: If the content is not a well-formed mapping
    """
    path = Path(path)
    if not path.exists():
        raise ProfileNotFoundError(path)

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ProfileParseError(path, str(e)) from e

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            profile = yaml.safe_load(raw)
        else:
            profile = json.loads(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ProfileParseError(path, str(e)) from e

    if not isinstance(profile, dict):
        raise ProfileParseError(path, "top-level value must be a mapping")

    return profile


def rewrite_host(profile: Dict[str, Any], override_host: str) -> Dict[str, Any]:
    """
    Point every peer, CA and orderer URL at override_host, in place.

    Only the first ``localhost`` in each URL is replaced. Nothing changes
    when override_host is the no-override sentinel. Descriptors without a
    url and missing sections are left as they are.

    Returns:
        The same profile object, for chaining
    """
    if override_host == NO_HOST_OVERRIDE:
        return profile

    for section in ENDPOINT_SECTIONS:
        descriptors = profile.get(section)
        if not isinstance(descriptors, dict):
            continue
        for name, descriptor in descriptors.items():
            if not isinstance(descriptor, dict):
                continue
            url = descriptor.get("url")
            if not isinstance(url, str) or not url:
                continue
            descriptor["url"] = url.replace(LOCALHOST, override_host, 1)
            logger.debug(f"Rewrote {section}.{name} url to {descriptor['url']}")

    return profile
