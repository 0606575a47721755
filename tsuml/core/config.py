"""Configuration: YAML project settings, tsconfig discovery and input globs."""

import glob
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .ast_parser import CompilerOptions
from .constants import DEFAULT_CONFIG_FILE, TSCONFIG_FILE
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Keys accepted in tsuml.yaml
CONFIG_KEYS = frozenset({
    "input",
    "output",
    "project",
    "associations",
    "field_associations",
    "only_interfaces",
    "only_classes",
    "colored_association_lines",
    "target_class",
    "format",
})

# Strings are matched first so comment markers and commas inside them survive
_JSONC_TOKENS = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/|,(?=\s*[}\]])', re.S)


# =============================================================================
# YAML project config
# =============================================================================


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load tsuml settings from YAML.

    Without ``config_path`` the file ``tsuml.yaml`` in the working
    directory is used when present; otherwise the result is empty.

    Raises:
        ConfigurationError: If an explicit file is missing, or the YAML is
            invalid or not a mapping.
    """
    if config_path is None:
        default = Path.cwd() / DEFAULT_CONFIG_FILE
        if not default.is_file():
            return {}
        path = default
    else:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Unable to read config file {path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    normalized = {str(key).replace("-", "_"): value for key, value in config.items()}
    unknown = sorted(set(normalized) - CONFIG_KEYS)
    if unknown:
        logger.warning(f"Ignoring unknown keys in {path}: {', '.join(unknown)}")
    logger.info(f"Loaded config from {path}")
    return {key: value for key, value in normalized.items() if key in CONFIG_KEYS}


# =============================================================================
# tsconfig.json
# =============================================================================


def find_tsconfig_file(input_path: str, project: Optional[str] = None) -> Optional[str]:
    """Locate the tsconfig to compile with.

    Order: ``project`` (a file, or a directory holding tsconfig.json), then
    tsconfig.json next to ``input_path``, then in the working directory.
    """
    if project is not None:
        if os.path.isfile(project):
            return project
        if os.path.isdir(project):
            candidate = os.path.join(project, TSCONFIG_FILE)
            if os.path.isfile(candidate):
                return candidate
        logger.warning(f"No tsconfig found at {project}")

    local = os.path.join(os.path.dirname(os.path.abspath(input_path)), TSCONFIG_FILE)
    if os.path.isfile(local):
        return local

    cwd_config = os.path.join(os.getcwd(), TSCONFIG_FILE)
    if os.path.isfile(cwd_config):
        return cwd_config
    return None


def parse_jsonc(text: str) -> Any:
    """Parse JSON that may contain comments and trailing commas."""

    def strip(match: re.Match) -> str:
        token = match.group(0)
        return token if token.startswith('"') else ""

    return json.loads(_JSONC_TOKENS.sub(strip, text))


def read_tsconfig(tsconfig_path: str, _seen: Optional[set] = None) -> CompilerOptions:
    """Read ``compilerOptions`` from a tsconfig, following relative ``extends``.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    seen = _seen or set()
    real_path = os.path.realpath(tsconfig_path)
    if real_path in seen:
        raise ConfigurationError(f"Circular 'extends' in tsconfig file at: {tsconfig_path}")
    seen.add(real_path)

    try:
        with open(tsconfig_path, "r", encoding="utf-8") as f:
            config = parse_jsonc(f.read())
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"unable to read tsconfig.json file at: {tsconfig_path}. Error: {e}") from e
    if not isinstance(config, dict):
        raise ConfigurationError(f"unable to read tsconfig.json file at: {tsconfig_path}.")

    config_dir = os.path.dirname(os.path.abspath(tsconfig_path))
    options = config.get("compilerOptions") or {}
    if not isinstance(options, dict):
        raise ConfigurationError(f"compilerOptions must be an object in {tsconfig_path}")
    result = CompilerOptions.from_dict(options, config_dir)

    base = config.get("extends")
    if isinstance(base, str) and base.startswith("."):
        base_path = os.path.join(config_dir, base)
        if not base_path.endswith(".json"):
            base_path += ".json"
        inherited = read_tsconfig(base_path, seen)
        if result.base_url is None:
            result.base_url = inherited.base_url
        result.paths = {**inherited.paths, **result.paths}
    elif base:
        logger.debug(f"Ignoring non-relative extends {base!r} in {tsconfig_path}")

    logger.debug(f"Compiler options from {tsconfig_path}: {result}")
    return result


# =============================================================================
# Inputs
# =============================================================================


def expand_inputs(patterns: Sequence[str]) -> List[str]:
    """Expand input globs into a sorted, de-duplicated list of files.

    A pattern without glob characters is kept as given even when missing,
    so reading it fails loudly later.
    """
    files: List[str] = []
    seen = set()
    for pattern in patterns:
        if any(char in pattern for char in "*?["):
            matches = sorted(glob.glob(pattern, recursive=True))
            if not matches:
                logger.warning(f"Input pattern matched no files: {pattern}")
        else:
            matches = [pattern]
        for match in matches:
            normalized = os.path.normpath(match)
            if normalized not in seen and not os.path.isdir(normalized):
                seen.add(normalized)
                files.append(normalized)
    return files
