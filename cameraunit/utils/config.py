import logging
import os
from typing import Any, Dict, Optional

import yaml

from cameraunit.utils.exceptions import InvalidValueError, IoFailureError

log = logging.getLogger(__name__)


def load_config(filename: str) -> Dict[str, Any]:
    """Loads a YAML configuration file.

    Values of the form ``{include <source.yaml> <key>}`` are replaced by the content of the given file, or by the
    part of it addressed by the optional dotted key. Included files are resolved relative to the including file and
    may contain includes themselves.

    Args:
        filename: Name of YAML file.

    Returns:
        Configuration as dictionary.

    Raises:
        IoFailureError: If a file could not be read.
        InvalidValueError: If a file is not valid YAML or does not contain a mapping.
    """

    config = _load_yaml(filename)
    if not isinstance(config, dict):
        raise InvalidValueError(f"Configuration in {filename} is not a mapping.")
    return config


def _load_yaml(filename: str) -> Any:
    # read file
    try:
        with open(filename, "r") as f:
            content = yaml.safe_load(f)
    except OSError as e:
        raise IoFailureError(f"Could not read configuration file {filename}: {e}") from e
    except yaml.YAMLError as e:
        raise InvalidValueError(f"Invalid YAML in {filename}: {e}") from e

    # resolve includes relative to this file
    return _resolve_includes(content, os.path.dirname(os.path.abspath(filename)))


def _resolve_includes(value: Any, path: str) -> Any:
    """Walks a loaded YAML document and replaces include blocks.

    YAML parses ``{include file.yaml key}`` as a flow mapping with a single key and no value, which is what we look
    for here.
    """

    if isinstance(value, dict):
        # include block?
        if len(value) == 1:
            key, val = next(iter(value.items()))
            if val is None and isinstance(key, str) and key.startswith("include "):
                return _include(key, path)

        # iterate
        return {k: _resolve_includes(v, path) for k, v in value.items()}

    elif isinstance(value, list):
        return [_resolve_includes(v, path) for v in value]

    else:
        return value


def _include(block: str, path: str) -> Any:
    # split into filename and optional key
    parts = block.split()
    if len(parts) not in [2, 3]:
        raise InvalidValueError(f"Invalid include block: {{{block}}}")
    filename = os.path.join(path, parts[1])
    key: Optional[str] = parts[2] if len(parts) == 3 else None

    # load it
    log.debug("Including %s from %s...", key or "everything", filename)
    include = _load_yaml(filename)

    # walk down dotted key
    if key is not None:
        for k in key.split("."):
            if not isinstance(include, dict) or k not in include:
                raise InvalidValueError(f"Key {key} not found in {filename}.")
            include = include[k]
    return include


__all__ = ["load_config"]
