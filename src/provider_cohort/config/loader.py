"""
Configuration Loader.

A run is configured by one YAML file and, optionally, a named profile
overlay deep-merged over it. Profiles are looked up beside the config file
(``<config dir>/profiles/<name>.yaml``) and then under the loader's base
path (``<base_path>/config/profiles/<name>.yaml``).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from provider_cohort.config.models import CohortConfig

logger = logging.getLogger(__name__)

PROFILE_DIR = "profiles"


def read_yaml(path: Path) -> Dict[str, Any]:
    """Parse a YAML file; an empty file yields an empty mapping."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Return base with overlay applied; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Reads CohortConfig from YAML, applying a profile overlay on request."""

    def __init__(self, base_path: Optional[Path] = None) -> None:
        """
        Args:
            base_path: Anchor for relative config paths and the fallback
                profile directory
        """
        self._base_path = Path(base_path) if base_path else Path(".")

    def load(
        self,
        config_path: Union[str, Path],
        profile: Optional[str] = None,
    ) -> CohortConfig:
        """
        Load and validate a config file.

        Args:
            config_path: YAML file, absolute or relative to base_path
            profile: Profile name to merge over the file

        Returns:
            Validated CohortConfig

        Raises:
            FileNotFoundError: If the config file or profile doesn't exist
            ValidationError: If the merged config is invalid
        """
        path = self._resolve_path(config_path)
        config_dict = read_yaml(path)

        if profile:
            profile_path = self.find_profile(profile, config_dir=path.parent)
            logger.info(f"Applying profile {profile!r} from {profile_path}")
            config_dict = deep_merge(config_dict, read_yaml(profile_path))

        return self.load_from_dict(config_dict)

    def load_from_dict(self, config_dict: Dict[str, Any]) -> CohortConfig:
        return CohortConfig.model_validate(config_dict)

    def profile_candidates(
        self,
        profile: str,
        config_dir: Optional[Path] = None,
    ) -> List[Path]:
        """Profile locations in lookup order."""
        filename = f"{profile}.yaml"
        candidates = []
        if config_dir is not None:
            candidates.append(config_dir / PROFILE_DIR / filename)
        candidates.append(self._base_path / "config" / PROFILE_DIR / filename)
        return candidates

    def find_profile(self, profile: str, config_dir: Optional[Path] = None) -> Path:
        candidates = self.profile_candidates(profile, config_dir)
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        searched = ", ".join(str(c) for c in candidates)
        raise FileNotFoundError(f"Profile not found: {profile} (searched {searched})")

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self._base_path / p


def load_config(
    config_path: Union[str, Path],
    profile: Optional[str] = None,
    base_path: Optional[Path] = None,
) -> CohortConfig:
    """Load a CohortConfig from YAML with an optional profile overlay."""
    return ConfigLoader(base_path=base_path).load(config_path, profile)
