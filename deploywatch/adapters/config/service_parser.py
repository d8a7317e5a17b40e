"""
Service configuration parser
"""
import json
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ...core.constants import (
    CONFIG_FILENAME_CANDIDATES,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_SERVERLESS_BIN,
    JSON_SUFFIXES,
    WATCH_CUSTOM_KEY,
    WATCH_INCLUDES_KEY,
    YAML_SUFFIXES,
)
from ...core.exceptions import ConfigError
from ...core.logging import get_logger
from ...domain.watch import ServiceMetadata

logger = get_logger(__name__)


class ServiceYamlLoader(yaml.SafeLoader):
    """SafeLoader that accepts CloudFormation short tags (!Ref, !GetAtt, ...)"""


def _construct_tagged(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> Any:
    if isinstance(node, yaml.ScalarNode):
        return loader.construct_scalar(node)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node)
    return loader.construct_mapping(node)


ServiceYamlLoader.add_multi_constructor("!", _construct_tagged)


def find_config_file(service_dir: Path, override: Optional[str] = None) -> Path:
    """
    Locate the service configuration file.

    Args:
        service_dir: Service root directory
        override: Explicit configuration path (relative to service_dir)

    Returns:
        Existing configuration file path

    Raises:
        ConfigError: If no configuration file exists
    """
    if override:
        path = Path(override).expanduser()
        if not path.is_absolute():
            path = service_dir / path
        if not path.exists():
            raise ConfigError(f"Service configuration not found: {override}")
        return path

    for name in CONFIG_FILENAME_CANDIDATES:
        path = service_dir / name
        if path.exists():
            return path

    raise ConfigError(
        f"No service configuration found in {service_dir} "
        f"(looked for {', '.join(CONFIG_FILENAME_CANDIDATES)})"
    )


def read_config_file(
    path: Path,
    serverless_bin: str = DEFAULT_SERVERLESS_BIN,
    stage: Optional[str] = None,
) -> Dict[str, Any]:
    """Read a YAML/JSON configuration, or ask the serverless CLI to print a JS/TS one"""
    suffix = path.suffix.lower()
    try:
        if suffix in YAML_SUFFIXES:
            data = yaml.load(path.read_text(encoding='utf-8'), Loader=ServiceYamlLoader)
        elif suffix in JSON_SUFFIXES:
            data = json.loads(path.read_text(encoding='utf-8'))
        else:
            data = print_resolved_config(path, serverless_bin, stage)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path.name}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse {path.name}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the top level")
    return data


def print_resolved_config(
    path: Path,
    serverless_bin: str = DEFAULT_SERVERLESS_BIN,
    stage: Optional[str] = None,
) -> Dict[str, Any]:
    """Resolve a programmatic configuration through `serverless print`"""
    cmd = [serverless_bin, "print", "--format", "json", "--config", path.name]
    if stage:
        cmd.extend(["--stage", stage])

    logger.debug(f"Resolving {path.name}: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            cwd=str(path.parent),
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise ConfigError(f"{serverless_bin} not found, cannot read {path.name}") from e
    except subprocess.CalledProcessError as e:
        raise ConfigError(
            f"`{' '.join(cmd)}` failed with exit code {e.returncode}: {e.stderr.strip()}"
        ) from e

    return json.loads(result.stdout)


def parse_functions(cfg: Dict[str, Any]) -> Dict[str, str]:
    """Parse function name -> handler reference"""
    functions = cfg.get("functions") or {}
    if not isinstance(functions, dict):
        raise ConfigError("'functions' must be a mapping")

    handlers: Dict[str, str] = {}
    for name, definition in functions.items():
        if not isinstance(definition, dict):
            raise ConfigError(f"Function {name} must be a mapping")
        handlers[str(name)] = definition.get("handler", "")
    return handlers


def parse_watch_extras(cfg: Dict[str, Any]) -> List[str]:
    """Parse custom.serverlessWatch.includes"""
    custom = cfg.get("custom") or {}
    watch_cfg = custom.get(WATCH_CUSTOM_KEY) if isinstance(custom, dict) else None
    if not watch_cfg:
        return []

    includes = watch_cfg.get(WATCH_INCLUDES_KEY) or []
    if not isinstance(includes, list) or not all(isinstance(p, str) for p in includes):
        raise ConfigError(
            f"custom.{WATCH_CUSTOM_KEY}.{WATCH_INCLUDES_KEY} must be a list of paths"
        )
    return list(includes)


def parse_service_metadata(
    cfg: Dict[str, Any],
    service_dir: Path,
    config_filename: str = DEFAULT_CONFIG_FILENAME,
) -> ServiceMetadata:
    """Build the metadata snapshot from a loaded configuration"""
    return ServiceMetadata(
        service_dir=str(service_dir),
        functions=parse_functions(cfg),
        config_filename=config_filename,
        watch_extras=tuple(parse_watch_extras(cfg)),
    )


def load_service_metadata(
    service_dir: Path,
    config_override: Optional[str] = None,
    serverless_bin: str = DEFAULT_SERVERLESS_BIN,
    stage: Optional[str] = None,
) -> ServiceMetadata:
    """
    Locate, read and parse the service configuration.

    Args:
        service_dir: Service root directory
        config_override: Explicit configuration path
        serverless_bin: serverless executable, used for JS/TS configurations
        stage: Stage passed to `serverless print`

    Returns:
        ServiceMetadata

    Raises:
        ConfigError: If the configuration is missing or malformed
    """
    path = find_config_file(service_dir, config_override)
    cfg = read_config_file(path, serverless_bin=serverless_bin, stage=stage)
    metadata = parse_service_metadata(cfg, service_dir, config_filename=path.name)
    logger.debug(
        f"Loaded {path.name}: {len(metadata.functions)} function(s), "
        f"{len(metadata.watch_extras)} extra path(s)"
    )
    return metadata
