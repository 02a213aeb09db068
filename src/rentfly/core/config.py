# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Layered configuration: packaged defaults, YAML/TOML files, profiles and env vars."""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_CONFIG_PROPERTIES_ATTR = "__rentfly_config_prefix__"

_ENV_PREFIX = "RENTFLY_"

_MAX_PLACEHOLDER_DEPTH = 10


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a class as bindable to a configuration prefix.

    Works with both dataclasses and Pydantic BaseModel subclasses. Keys in
    the configuration files use kebab-case (``timeout-seconds``) and are
    matched against snake_case field names.

    Usage:
        @config_properties(prefix="rentfly.cache")
        @dataclass
        class CacheProperties:
            eviction: str = "never"
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


def _snake_keys(section: dict[str, Any]) -> dict[str, Any]:
    """Rewrite top-level ``kebab-case`` keys to ``snake_case``.

    Nested mappings (e.g. HTTP header names) are left untouched.
    """
    return {k.replace("-", "_") if isinstance(k, str) else k: v for k, v in section.items()}


def _coerce(value: Any, expected: Any) -> Any:
    if not isinstance(value, str):
        return value
    if expected is bool:
        return value.strip().lower() in ("true", "1", "yes", "on")
    if expected is int:
        return int(value)
    if expected is float:
        return float(value)
    return value

class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (RENTFLY_SECTION_KEY format)
    2. Configuration dict / YAML file values
    3. Packaged defaults and class defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """List of config file paths that were loaded, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw configuration data."""
        return dict(self._data)

    @classmethod
    def from_sources(
        cls,
        base_dir: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load and merge config from every known location.

        Merge order (later wins):
        1. Packaged defaults (rentfly-defaults.yaml)
        2. config/rentfly.yaml or config/rentfly.toml
        3. rentfly.yaml or rentfly.toml in *base_dir*
        4. Profile overlays: config/rentfly-{profile}.yaml, rentfly-{profile}.yaml
        5. Environment variables (handled at read time in get())
        """
        base_dir = Path(base_dir)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_packaged_defaults()
            sources.append("rentfly-defaults.yaml (packaged defaults)")

        for search_dir in (base_dir / "config", base_dir):
            for ext in (".yaml", ".toml"):
                candidate = search_dir / f"rentfly{ext}"
                if candidate.is_file():
                    data = cls._deep_merge(data, cls._load_config_data(candidate))
                    sources.append(str(candidate))

        for profile in active_profiles or []:
            for search_dir in (base_dir / "config", base_dir):
                for ext in (".yaml", ".toml"):
                    candidate = search_dir / f"rentfly-{profile}{ext}"
                    if candidate.is_file():
                        data = cls._deep_merge(data, cls._load_config_data(candidate))
                        sources.append(f"{candidate} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load configuration from one YAML or TOML file on top of the defaults.

        Profile overlays are looked up next to the file as
        ``{stem}-{profile}{suffix}``.
        """
        path = Path(path)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_packaged_defaults()
            sources.append("rentfly-defaults.yaml (packaged defaults)")

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        data = cls._deep_merge(data, cls._load_config_data(path))
        sources.append(str(path))

        for profile in active_profiles or []:
            profile_path = path.parent / f"{path.stem}-{profile}{path.suffix}"
            if profile_path.exists():
                data = cls._deep_merge(data, cls._load_config_data(profile_path))
                sources.append(f"{profile_path} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @classmethod
    def defaults(cls) -> Config:
        """Configuration holding only the packaged defaults."""
        instance = cls(cls._load_packaged_defaults())
        instance._loaded_sources = ["rentfly-defaults.yaml (packaged defaults)"]
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        """Load config data from a YAML or TOML file."""
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f) or {}
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _load_packaged_defaults() -> dict[str, Any]:
        """Load built-in defaults from rentfly.resources."""
        defaults_file = importlib.resources.files("rentfly.resources").joinpath("rentfly-defaults.yaml")
        with importlib.resources.as_file(defaults_file) as p, open(p) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, with override values winning."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    @staticmethod
    def _env_key(key: str) -> str:
        # rentfly.auth.base-url -> RENTFLY_AUTH_BASE_URL
        return _ENV_PREFIX + key.removeprefix("rentfly.").upper().replace(".", "_").replace("-", "_")

    def _walk(self, key: str) -> Any:
        """Raw value at a dot-notation path, or None when any segment is absent."""
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict):
                return None
            node = node.get(part)
            if node is None:
                return None
        return node

    def get(self, key: str, default: Any = None) -> Any:
        """Value at a dot-notation key.

        ``RENTFLY_*`` environment variables win over file values. Strings
        holding ``${NAME}``, ``${rentfly.some.key}`` or ``${NAME:fallback}``
        placeholders are expanded.
        """
        env_val = os.environ.get(self._env_key(key))
        if env_val is not None:
            return env_val
        value = self._walk(key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._expand(value)
        return value

    def _expand(self, value: str, depth: int = 0) -> str:
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Placeholder nesting too deep in '{value}' (circular reference?)")

        def substitute(match: re.Match[str]) -> str:
            name, sep, fallback = match.group(1).partition(":")
            from_env = os.environ.get(name)
            if from_env is not None:
                return from_env
            found = self._walk(name)
            if found is not None:
                text = str(found)
                return self._expand(text, depth + 1) if "${" in text else text
            if sep:
                return fallback
            raise ValueError(f"Cannot resolve placeholder '${{{name}}}': not found in environment or config")

        return _PLACEHOLDER_RE.sub(substitute, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Every value under *prefix*, with env overrides and placeholders applied.

        Only leaf keys already present in the section can be overridden from
        the environment.
        """
        section = self._walk(prefix)
        if not isinstance(section, dict):
            return {}
        return self._resolve_section(prefix, section)

    def _resolve_section(self, prefix: str, section: dict[str, Any]) -> dict[str, Any]:
        return {
            key: self._resolve_section(f"{prefix}.{key}", value)
            if isinstance(value, dict)
            else self.get(f"{prefix}.{key}", value)
            for key, value in section.items()
        }

    def bind(self, config_cls: type[T]) -> T:
        """Build a ``@config_properties`` dataclass or pydantic model from its section."""
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        section = _snake_keys(self.get_section(prefix))

        if issubclass(config_cls, BaseModel):
            try:
                return config_cls.model_validate(section)
            except ValidationError as exc:
                raise ValueError(
                    f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}"
                ) from exc

        # env overrides arrive as strings; dataclass fields get a scalar coercion
        hints = get_type_hints(config_cls)
        kwargs = {
            f.name: _coerce(section[f.name], hints.get(f.name))
            for f in dataclasses.fields(config_cls)  # type: ignore[arg-type]
            if f.name in section
        }
        return config_cls(**kwargs)
