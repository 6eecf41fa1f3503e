"""Configuration loading and management"""

import os
from dataclasses import asdict, fields
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from ..core.models import AuditConfiguration
from ..utils.logger import setup_logger


class ConfigurationLoader:
    """Load audit configuration from defaults, YAML, environment and overrides"""

    ENV_PREFIX = 'AZURE_DISK_AUDITOR_'

    DEFAULT_LOCATIONS = [
        "azure_disk_auditor.yml",
        "azure_disk_auditor.yaml",
        os.path.expanduser("~/.azure_disk_auditor.yml"),
        os.path.expanduser("~/.config/azure_disk_auditor/config.yml"),
    ]

    def __init__(self):
        self.logger = setup_logger(self.__class__.__name__)

    def load_configuration(
        self,
        config_file: Optional[str] = None,
        **overrides
    ) -> AuditConfiguration:
        """Merge configuration sources, later ones winning"""

        config_dict = asdict(AuditConfiguration())

        file_config = self._load_from_file(config_file) if config_file else self._load_default_config()
        if file_config:
            config_dict.update(file_config)

        config_dict.update(self._load_from_environment())
        config_dict.update({k: v for k, v in overrides.items() if v is not None})

        known_keys = {f.name for f in fields(AuditConfiguration)}
        unknown = set(config_dict) - known_keys
        if unknown:
            self.logger.warning(f"Ignoring unknown configuration keys: {', '.join(sorted(unknown))}")

        try:
            config_dict['max_workers'] = int(config_dict['max_workers'])
        except (TypeError, ValueError):
            raise ValueError(f"Max workers must be an integer, got {config_dict['max_workers']!r}")

        config = AuditConfiguration(**{k: v for k, v in config_dict.items() if k in known_keys})
        self._validate_configuration(config)
        return config

    def _load_from_file(self, config_file: str) -> Optional[Dict[str, Any]]:
        """Load configuration from YAML file"""

        config_path = Path(config_file)
        if not config_path.exists():
            self.logger.warning(f"Configuration file not found: {config_file}")
            return None

        if config_path.suffix.lower() not in ['.yml', '.yaml']:
            self.logger.error(f"Unsupported config file format: {config_path.suffix}")
            return None

        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        self.logger.info(f"Loaded configuration from: {config_file}")
        return self._flatten_config(config_data)

    def _load_default_config(self) -> Optional[Dict[str, Any]]:
        for location in self.DEFAULT_LOCATIONS:
            if os.path.exists(location):
                return self._load_from_file(location)
        return None

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration from AZURE_DISK_AUDITOR_* variables"""

        env_config = {}
        env_mapping = {
            'TENANT_ID': ('tenant_id', str),
            'MAX_WORKERS': ('max_workers', int),
            'CSV_PATH': ('csv_path', str),
            'EXCEL_PATH': ('excel_path', str),
            'INCLUDE_DISABLED_SUBSCRIPTIONS': ('include_disabled_subscriptions', self._parse_bool),
        }

        for suffix, (config_key, parser) in env_mapping.items():
            env_var = self.ENV_PREFIX + suffix
            value = os.getenv(env_var)
            if value is None:
                continue
            try:
                env_config[config_key] = parser(value)
                self.logger.debug(f"Loaded {config_key} from environment: {value}")
            except ValueError as e:
                self.logger.warning(f"Failed to parse environment variable {env_var}={value}: {e}")

        return env_config

    def _flatten_config(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Flatten section headings away, keeping leaf keys"""

        flattened = {}

        def _flatten(obj):
            for key, value in obj.items():
                if isinstance(value, dict):
                    _flatten(value)
                else:
                    flattened[key] = value

        _flatten(config_data)
        return flattened

    def _parse_bool(self, value: str) -> bool:
        return value.lower() in ('true', '1', 'yes', 'on', 'enabled')

    def _validate_configuration(self, config: AuditConfiguration) -> None:
        if config.max_workers < 1:
            raise ValueError("Max workers must be at least 1")

        if config.max_workers > 20:
            self.logger.warning("High number of parallel workers may cause API rate limiting")

        if not config.csv_path or not config.excel_path:
            raise ValueError("Output paths must not be empty")

        self.logger.debug("Configuration validation completed")


def create_sample_config(output_file: str = "azure_disk_auditor_sample.yml") -> None:
    """Write a sample configuration file"""

    sample_config = {
        'audit': {
            'tenant_id': '00000000-0000-0000-0000-000000000000',
            'max_workers': 5,
            'include_disabled_subscriptions': False,
        },
        'output': {
            'csv_path': 'Tenant-Full-Compute-Disk-Audit.csv',
            'excel_path': 'Tenant-Disk-Summary.xlsx',
        },
    }

    with open(output_file, 'w') as f:
        f.write("# Azure Disk Auditor Configuration\n\n")
        yaml.dump(sample_config, f, default_flow_style=False, indent=2)
