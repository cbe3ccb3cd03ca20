from pathlib import Path
from typing import Any, Dict, Optional, List
import yaml

from utils.logger import setup_logger

logger = setup_logger(__name__)

DEFAULT_TABLES_PATH = Path(__file__).resolve().parent / "pairing_tables.yaml"

REQUIRED_SECTIONS = [
    "flavor_compatibility",
    "origin_affinity",
    "roast_textures",
    "seasonal_factors",
    "popularity_factors",
]


class ConfigurationError(Exception):
    pass


class ConfigLoader:
    def __init__(self, config_path: Optional[Path] = None):
        if config_path is None:
            config_path = DEFAULT_TABLES_PATH

        self.config_path = Path(config_path)
        self._config: Optional[Dict[str, Any]] = None
        self._last_loaded: Optional[float] = None

    def load(self, force_reload: bool = False) -> Dict[str, Any]:
        if not self.config_path.exists():
            raise ConfigurationError(f"config file not found: {self.config_path}")

        current_mtime = self.config_path.stat().st_mtime

        if not force_reload and self._config is not None and self._last_loaded == current_mtime:
            return self._config

        logger.info(
            "Loading pairing tables from file",
            extra={"config_path": str(self.config_path)}
        )

        with open(self.config_path, "r") as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raise ConfigurationError("config file is empty")
        if not isinstance(raw_config, dict):
            raise ConfigurationError(f"config root must be a mapping, got {type(raw_config).__name__}")

        self._config = raw_config
        self._last_loaded = current_mtime

        logger.info(
            "Pairing tables loaded",
            extra={"sections": sorted(raw_config.keys())}
        )

        return self._config

    def get(self, path: str, default: Any = None) -> Any:
        if self._config is None:
            self.load()

        keys = path.split('.')
        current = self._config

        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default

        return current

    def reload(self) -> Dict[str, Any]:
        logger.info("Reloading pairing tables")
        return self.load(force_reload=True)


def _is_token_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) and v.strip() for v in value)


def _section(config: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
    # missing or mistyped sections are reported once, by validate_sections
    table = config.get(name)
    return table if isinstance(table, dict) else None


class ConfigValidator:
    @staticmethod
    def validate_sections(config: Dict[str, Any]) -> List[str]:
        errors = []

        for section in REQUIRED_SECTIONS:
            value = config.get(section)
            if not value:
                errors.append(f"missing or empty section: {section}")
            elif not isinstance(value, dict):
                errors.append(f"section {section} must be a mapping, got {type(value).__name__}")

        return errors

    @staticmethod
    def validate_flavor_compatibility(config: Dict[str, Any]) -> List[str]:
        errors = []

        table = _section(config, 'flavor_compatibility')
        if table is None:
            return errors

        for token, compatible in table.items():
            if not _is_token_list(compatible):
                errors.append(f"flavor_compatibility.{token} must be a list of tokens")
                continue
            lowered = [c.strip().lower() for c in compatible]
            if str(token).strip().lower() in lowered:
                errors.append(f"flavor_compatibility.{token} must not list itself")

        return errors

    @staticmethod
    def validate_origin_affinity(config: Dict[str, Any]) -> List[str]:
        errors = []

        table = _section(config, 'origin_affinity')
        if table is None:
            return errors

        for origin, expected in table.items():
            if not _is_token_list(expected):
                errors.append(f"origin_affinity.{origin} must be a list of tokens")

        return errors

    @staticmethod
    def validate_roast_textures(config: Dict[str, Any]) -> List[str]:
        errors = []

        table = _section(config, 'roast_textures')
        if table is None:
            return errors

        for roast in ("dark", "light"):
            textures = table.get(roast)
            if not _is_token_list(textures) or not textures:
                errors.append(f"roast_textures.{roast} must be a non-empty list of tokens")

        return errors

    @staticmethod
    def validate_seasonal_factors(config: Dict[str, Any]) -> List[str]:
        errors = []

        table = _section(config, 'seasonal_factors')
        if table is None:
            return errors

        for season, multiplier in table.items():
            if not isinstance(multiplier, (int, float)) or multiplier < 0.9 or multiplier > 1.1:
                errors.append(f"invalid seasonal_factors.{season}: {multiplier} (must be between 0.9 and 1.1)")

        return errors

    @staticmethod
    def validate_popularity_factors(config: Dict[str, Any]) -> List[str]:
        errors = []

        table = _section(config, 'popularity_factors')
        if table is None:
            return errors

        for key, multiplier in table.items():
            if not isinstance(key, (int, float)) or key < 0.3 or key > 0.9:
                errors.append(f"invalid popularity_factors key: {key} (must be between 0.3 and 0.9)")
            if not isinstance(multiplier, (int, float)) or multiplier < 0.95 or multiplier > 1.1:
                errors.append(f"invalid popularity_factors.{key}: {multiplier} (must be between 0.95 and 1.1)")

        return errors

    @staticmethod
    def validate(config: Dict[str, Any]) -> List[str]:
        all_errors = []

        all_errors.extend(ConfigValidator.validate_sections(config))
        all_errors.extend(ConfigValidator.validate_flavor_compatibility(config))
        all_errors.extend(ConfigValidator.validate_origin_affinity(config))
        all_errors.extend(ConfigValidator.validate_roast_textures(config))
        all_errors.extend(ConfigValidator.validate_seasonal_factors(config))
        all_errors.extend(ConfigValidator.validate_popularity_factors(config))

        return all_errors


def load_validated_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    loader = ConfigLoader(config_path=config_path)

    config = loader.load()

    validation_errors = ConfigValidator.validate(config)
    if validation_errors:
        error_msg = "Pairing table validation failed:\n" + "\n".join(f"  - {err}" for err in validation_errors)
        logger.error(error_msg)
        raise ConfigurationError(error_msg)

    logger.info("Pairing tables validated successfully")

    return config
