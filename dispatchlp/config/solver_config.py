"""
Solver configuration for the HiGHS adapter.

Dataclass-based settings with YAML load/save, mapped onto the ``options``
dictionaries accepted by ``scipy.optimize.linprog`` and ``scipy.optimize.milp``.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


@dataclass
class SolverConfig:
    """HiGHS settings shared by LP and MIP solves."""
    time_limit_seconds: Optional[float] = None  # None = no limit
    mip_rel_gap: float = 1e-4  # MIP only
    presolve: bool = True
    disp: bool = False

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "SolverConfig":
        """
        Load solver configuration from a YAML file.

        Expects the settings at top level or under a ``solver`` key.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Validated SolverConfig instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ValueError: If YAML is empty or a value is invalid
        """
        yaml_path = Path(yaml_path)

        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f)

        if config_dict is None:
            raise ValueError(f"Empty or invalid YAML file: {yaml_path}")

        config_dict = config_dict.get('solver', config_dict)

        config = cls(
            time_limit_seconds=config_dict.get('time_limit_seconds', None),
            mip_rel_gap=config_dict.get('mip_rel_gap', 1e-4),
            presolve=config_dict.get('presolve', True),
            disp=config_dict.get('disp', False),
        )
        config.validate()
        return config

    def to_yaml(self, yaml_path: Union[str, Path]) -> None:
        """
        Save configuration to YAML file under a ``solver`` key.

        Args:
            yaml_path: Path to save YAML file
        """
        yaml_path = Path(yaml_path)
        yaml_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = {
            'solver': {
                'time_limit_seconds': self.time_limit_seconds,
                'mip_rel_gap': self.mip_rel_gap,
                'presolve': self.presolve,
                'disp': self.disp,
            },
        }

        with open(yaml_path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.time_limit_seconds is not None and self.time_limit_seconds <= 0:
            raise ValueError("time_limit_seconds must be positive")
        if self.mip_rel_gap < 0:
            raise ValueError("mip_rel_gap must be non-negative")
        if not isinstance(self.presolve, bool):
            raise ValueError(f"presolve must be a boolean, got {self.presolve!r}")
        if not isinstance(self.disp, bool):
            raise ValueError(f"disp must be a boolean, got {self.disp!r}")

    def to_options(self, mip: bool = False) -> Dict[str, Any]:
        """
        Build the scipy ``options`` dictionary.

        Args:
            mip: Include MIP-only settings (for ``milp``)
        """
        options: Dict[str, Any] = {
            'presolve': self.presolve,
            'disp': self.disp,
        }
        if self.time_limit_seconds is not None:
            options['time_limit'] = float(self.time_limit_seconds)
        if mip:
            options['mip_rel_gap'] = self.mip_rel_gap
        return options
