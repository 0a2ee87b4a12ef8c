import os
import shlex
import pkgutil
import tomllib

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pipeline_harness.exceptions import ConfigurationError

DEFAULT_USER_CONFIG = ".pipeline-test.toml"


@dataclass
class Target:
    """One compose service the harness knows how to run."""
    name: str
    compose_files: list[str]
    service: str
    command: list[str] = field(default_factory=list)
    workdir: Optional[str] = None


@dataclass
class HarnessConfig:
    target: Target
    compose: list[str] = field(default_factory=lambda: ["docker-compose"])
    dry_run: bool = False
    debug_level: int = 0


def env_truthy(key, default=False):
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")

def env_int(key, default = 0):
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from None

def debug_level():
    if env_truthy('PIPELINE_TEST_VERBOSE'):
        return max(2, env_int('PIPELINE_TEST_DEBUG'))
    return env_int('PIPELINE_TEST_DEBUG')

def load_defaults():
    data = pkgutil.get_data("pipeline_harness", "defaults.toml")
    assert data is not None
    return tomllib.loads(data.decode("utf-8"))

def load_file(path):
    """Parse a user TOML config file."""
    try:
        return tomllib.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigurationError(f"config file not found: {path}") from None
    except OSError as e:
        raise ConfigurationError(f"cannot read config file {path}: {e.strerror}") from None
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"invalid config file {path}: {e}") from None

def merge(base, override):
    """Overlay *override* on *base*; targets replace same-named targets whole."""
    merged = dict(base)
    for key, value in override.items():
        if key == 'targets':
            if not isinstance(value, dict):
                raise ConfigurationError("'targets' must be a table")
            targets = dict(base.get('targets', {}))
            targets.update(value)
            merged['targets'] = targets
        else:
            merged[key] = value
    return merged

def user_config_path():
    if os.environ.get('PIPELINE_TEST_CONFIG'):
        return Path(os.environ['PIPELINE_TEST_CONFIG'])
    path = Path(DEFAULT_USER_CONFIG)
    return path if path.is_file() else None

def _string_list(value, what):
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"{what} must be a list of strings")
    return list(value)

def parse_target(name, raw) -> Target:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"target '{name}' must be a table")
    if 'service' not in raw or not isinstance(raw['service'], str):
        raise ConfigurationError(f"target '{name}' needs a 'service' string")

    workdir = raw.get('workdir')
    if workdir is not None and not isinstance(workdir, str):
        raise ConfigurationError(f"target '{name}': 'workdir' must be a string")

    return Target(
        name=name,
        compose_files=_string_list(raw.get('compose_files', []), f"target '{name}': 'compose_files'"),
        service=raw['service'],
        command=_string_list(raw.get('command', []), f"target '{name}': 'command'"),
        workdir=workdir,
    )

def load_config(path=None) -> HarnessConfig:
    """Build the effective configuration from defaults, user file and environment."""
    raw = load_defaults()

    path = path or user_config_path()
    if path is not None:
        raw = merge(raw, load_file(path))

    targets = raw.get('targets', {})
    name = os.environ.get('PIPELINE_TEST_TARGET') or raw.get('default_target')
    if not isinstance(name, str):
        raise ConfigurationError(f"'default_target' must be a string, got {name!r}")
    if name not in targets:
        known = ', '.join(sorted(targets)) or '(none)'
        raise ConfigurationError(f"unknown target {name!r} (known: {known})")

    if 'PIPELINE_TEST_COMPOSE' in os.environ:
        try:
            compose = shlex.split(os.environ['PIPELINE_TEST_COMPOSE'])
        except ValueError as e:
            raise ConfigurationError(f"PIPELINE_TEST_COMPOSE: {e}") from None
    else:
        compose = _string_list(raw.get('compose', ["docker-compose"]), "'compose'")
    if not compose:
        raise ConfigurationError("compose launcher is empty")

    return HarnessConfig(
        target=parse_target(name, targets[name]),
        compose=compose,
        dry_run=env_truthy('PIPELINE_TEST_DRY_RUN'),
        debug_level=debug_level(),
    )
