"""
dotlocal settings (YAML layers + environment overrides).

Sources, highest priority first:
1. Explicit arguments to :func:`load_settings` (``public_root``, ``home``)
2. Environment variables: ``DOTLOCAL_<section>__<key>`` (and ``DOTFILES_DIR``
   for the public tree)
3. User config: ``$XDG_CONFIG_HOME/dotlocal/config.yaml``
4. Bundled defaults: ``dotlocal.data/config/defaults.yaml``

The merged mapping is validated against the bundled JSON schema before it
is turned into an immutable :class:`Settings`.
"""
from __future__ import annotations

import copy
import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import yaml

try:  # jsonschema is a declared dependency
    from jsonschema import Draft202012Validator
except Exception as err:  # pragma: no cover - surfaced at import time
    raise RuntimeError("jsonschema is required: pip install jsonschema") from err

from dotlocal.core.exceptions import SettingsError
from dotlocal.core.utils.merge import deep_merge
from dotlocal.core.utils.paths import expand_path
from dotlocal.data import read_yaml as read_data_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "DOTLOCAL_"
PUBLIC_ROOT_ENV = "DOTFILES_DIR"
USER_CONFIG_NAME = "config.yaml"


@dataclass(frozen=True)
class CloudLocation:
    """One tier-5 probe: an absolute path and the provider it belongs to."""

    path: Path
    provider: str = "unknown"


@dataclass(frozen=True)
class InfrastructureSpec:
    """Raw infrastructure table row: link name and public-tree-relative target."""

    name: str
    target: str


@dataclass(frozen=True)
class Settings:
    """Effective settings for one process."""

    home: Path
    public_root: Path
    config_filename: str = "dotfiles.conf"
    local_marker: str = ".dotlocal"
    standard_location: Path = Path("~/.dotlocal")
    cloud_locations: Tuple[CloudLocation, ...] = ()
    marker_suffix: str = ".symlink"
    private_prefix: str = "."
    exclude_dirs: Tuple[str, ...] = (".git", "backups", "vscode-backup", "tests")
    exclude_suffixes: Tuple[str, ...] = (".example",)
    public_exclude_dirs: Tuple[str, ...] = (".local", ".dotlocal")
    infrastructure: Tuple[InfrastructureSpec, ...] = field(default_factory=tuple)

    @property
    def config_file(self) -> Path:
        return self.public_root / self.config_filename

    @property
    def marker_path(self) -> Path:
        return self.public_root / self.local_marker

    def to_dict(self) -> Dict[str, Any]:
        return {
            "home": str(self.home),
            "public_root": str(self.public_root),
            "config_file": str(self.config_file),
            "local_marker": str(self.marker_path),
            "standard_location": str(self.standard_location),
            "cloud_locations": [
                {"path": str(c.path), "provider": c.provider} for c in self.cloud_locations
            ],
            "links": {
                "marker_suffix": self.marker_suffix,
                "private_prefix": self.private_prefix,
                "exclude_dirs": list(self.exclude_dirs),
                "exclude_suffixes": list(self.exclude_suffixes),
                "public_exclude_dirs": list(self.public_exclude_dirs),
            },
            "infrastructure": [{"name": i.name, "target": i.target} for i in self.infrastructure],
        }


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------


def _coerce_type(value: str) -> Any:
    s = value.strip()
    low = s.lower()
    if low in {"true", "false"}:
        return low == "true"
    if re.fullmatch(r"[-+]?\d+", s):
        return int(s)
    if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
        try:
            return json.loads(s)
        except ValueError:
            return s
    return s


def _iter_env_overrides(environ: Mapping[str, str]) -> Iterator[Tuple[List[str], Any]]:
    for key in sorted(environ.keys()):
        if not key.startswith(ENV_PREFIX):
            continue
        raw = key[len(ENV_PREFIX):]
        segs = raw.split("__")
        if not raw or any(seg == "" for seg in segs):
            logger.warning("Ignoring malformed settings override %s", key)
            continue
        yield [seg.lower() for seg in segs], _coerce_type(environ[key])


def _set_nested(root: Dict[str, Any], path: List[str], value: Any) -> None:
    cur: Dict[str, Any] = root
    for part in path[:-1]:
        nxt = cur.get(part)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[part] = nxt
        cur = nxt
    cur[path[-1]] = value


def apply_env_overrides(cfg: Dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Apply ``DOTLOCAL_<section>__<key>`` overrides onto a copy of ``cfg``."""
    env = os.environ if environ is None else environ
    result = copy.deepcopy(cfg)
    for path, value in _iter_env_overrides(env):
        _set_nested(result, path, value)
    return result


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def user_config_path(home: Path, environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    xdg = env.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path(home) / ".config"
    return base / "dotlocal" / USER_CONFIG_NAME


def _load_user_layer(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise SettingsError(f"Cannot read settings file {path}: {exc}", context={"path": str(path)}) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file must contain a mapping: {path}", context={"path": str(path)})
    return data


def validate_settings(cfg: Dict[str, Any]) -> None:
    """Validate merged settings against the bundled schema.

    Raises:
        SettingsError: listing every violation found
    """
    schema = read_data_yaml("schemas", "settings.schema.yaml")
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(cfg), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = []
        for err in errors:
            where = "/".join(str(p) for p in err.path) or "<root>"
            lines.append(f"{where}: {err.message}")
        raise SettingsError(
            "Invalid dotlocal settings:\n  " + "\n  ".join(lines),
            context={"errors": lines},
        )


def load_settings_dict(home: Path, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Return the merged (unvalidated) settings mapping."""
    defaults = read_data_yaml("config", "defaults.yaml")
    merged = deep_merge({}, defaults)
    merged = deep_merge(merged, _load_user_layer(user_config_path(home, environ)))
    return apply_env_overrides(merged, environ)


def load_settings(
    *,
    public_root: Optional[Path] = None,
    home: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load, merge and validate settings.

    Args:
        public_root: Explicit public tree; beats ``DOTFILES_DIR`` and settings.
        home: Home directory; defaults to ``Path.home()``.
        environ: Environment mapping (defaults to ``os.environ``).

    Raises:
        SettingsError: If a settings layer is unreadable or the result is invalid.
    """
    env = os.environ if environ is None else environ
    home_dir = Path(home) if home is not None else Path.home()

    cfg = load_settings_dict(home_dir, env)
    validate_settings(cfg)

    paths = cfg["paths"]
    if public_root is not None:
        public = Path(public_root)
    elif env.get(PUBLIC_ROOT_ENV):
        public = expand_path(env[PUBLIC_ROOT_ENV], home_dir)
    else:
        public = expand_path(paths["public_root"], home_dir)

    links = cfg["links"]
    clouds = tuple(
        CloudLocation(path=expand_path(c["path"], home_dir), provider=c.get("provider", "unknown"))
        for c in cfg["discovery"]["cloud_locations"]
    )
    infra = tuple(InfrastructureSpec(name=i["name"], target=i["target"]) for i in cfg["infrastructure"])

    return Settings(
        home=home_dir,
        public_root=public,
        config_filename=paths["config_file"],
        local_marker=paths["local_marker"],
        standard_location=expand_path(paths["standard_location"], home_dir),
        cloud_locations=clouds,
        marker_suffix=links["marker_suffix"],
        private_prefix=links["private_prefix"],
        exclude_dirs=tuple(links.get("exclude_dirs", ())),
        exclude_suffixes=tuple(links.get("exclude_suffixes", ())),
        public_exclude_dirs=tuple(links.get("public_exclude_dirs", ())),
        infrastructure=infra,
    )


__all__ = [
    "Settings",
    "CloudLocation",
    "InfrastructureSpec",
    "apply_env_overrides",
    "load_settings",
    "load_settings_dict",
    "validate_settings",
    "user_config_path",
    "ENV_PREFIX",
    "PUBLIC_ROOT_ENV",
]
