"""
Watch domain models
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ...core.constants import DEFAULT_CONFIG_FILENAME, SERVICE_FORWARDED_OPTIONS


@dataclass(frozen=True)
class ServiceMetadata:
    """
    Snapshot of the service description supplied by the host platform.

    Attributes:
        service_dir: Service root directory
        functions: Function name -> handler reference ("src/index.handler")
        config_filename: Conventional service configuration filename
        watch_extras: Additional paths from custom.serverlessWatch.includes
    """
    service_dir: str
    functions: Mapping[str, str]
    config_filename: str = DEFAULT_CONFIG_FILENAME
    watch_extras: Tuple[str, ...] = ()

    def __post_init__(self):
        # Copy host-owned containers so later mutation on their side is not observed
        object.__setattr__(self, "functions", MappingProxyType(dict(self.functions)))
        object.__setattr__(self, "watch_extras", tuple(self.watch_extras))


@dataclass(frozen=True)
class DeploymentTarget:
    """
    One independently deployable function.

    handler_path is the handler reference without its entry symbol;
    source_path is the same path under the service directory. source_path is
    watched and matched against absolute change paths, handler_path against
    relative ones.
    """
    name: str
    handler_path: str
    source_path: str


@dataclass(frozen=True)
class Catalog:
    """Resolved targets plus every path that triggers a deploy"""
    targets: Tuple[DeploymentTarget, ...]
    config_path: str
    watch_extras: Tuple[str, ...] = ()

    @property
    def watch_set(self) -> Tuple[str, ...]:
        """Target paths, then the config path, then the extras"""
        return (
            *(target.source_path for target in self.targets),
            self.config_path,
            *self.watch_extras,
        )

    @property
    def names(self) -> List[str]:
        return [target.name for target in self.targets]

    def get(self, name: str) -> Optional[DeploymentTarget]:
        for target in self.targets:
            if target.name == name:
                return target
        return None


@dataclass(frozen=True)
class SingleTarget:
    """The change belongs to exactly one function"""
    name: str


@dataclass(frozen=True)
class ServiceConfig:
    """The change is the service configuration file"""


@dataclass(frozen=True)
class Unmatched:
    """The change belongs to no function and is not the configuration"""


ResolutionResult = Union[SingleTarget, ServiceConfig, Unmatched]


class ControllerState(str, Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"


@dataclass(frozen=True)
class DispatchOptions:
    """
    Options handed to the deploy primitives.

    user_options holds what the user passed on the command line. force,
    function and update_config are injected per dispatch through
    for_function(), which always returns a new value.
    """
    user_options: Mapping[str, Any] = field(default_factory=dict)
    force: bool = False
    function: Optional[str] = None
    update_config: bool = False

    def __post_init__(self):
        cleaned = {k: v for k, v in dict(self.user_options).items() if v is not None}
        object.__setattr__(self, "user_options", MappingProxyType(cleaned))

    @classmethod
    def from_cli(cls, **options: Any) -> "DispatchOptions":
        return cls(user_options=options)

    def for_function(self, name: str) -> "DispatchOptions":
        return replace(self, force=True, update_config=False, function=name)

    def service_argv(self) -> List[str]:
        """Argument vector for the full service deploy"""
        argv = ["deploy", "--force"]
        for key in SERVICE_FORWARDED_OPTIONS:
            if key in self.user_options:
                argv.extend(_option_args(key, self.user_options[key]))
        return argv

    def function_argv(self) -> List[str]:
        """Argument vector for a single function deploy"""
        if not self.function:
            raise ValueError("function_argv() requires a function; use for_function()")
        argv = ["deploy", "function", "--function", self.function]
        if self.force:
            argv.append("--force")
        if self.update_config:
            argv.append("--update-config")
        for key, value in self.user_options.items():
            if key == "function":
                continue
            argv.extend(_option_args(key, value))
        return argv

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            **self.user_options,
            "force": self.force,
            "function": self.function,
            "update-config": self.update_config,
        }


def _option_args(key: str, value: Any) -> List[str]:
    flag = f"--{key}"
    if isinstance(value, bool):
        return [flag] if value else []
    return [flag, str(value)]
