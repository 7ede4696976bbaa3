"""
YAML game configuration loader with schema validation.

Loads the game configuration (field, fish lanes, agent, hand, bowl, delivery
and session sections) from a YAML file, validates it against a JSON schema
and parses it into the dataclasses of data_types.py.
"""

import yaml
import json
from pathlib import Path
from typing import Optional
import jsonschema

from .data_types import (
    GameConfig, FieldConfig, FishConfig, LaneConfig, AgentConfig,
    HandConfig, BowlConfig, DeliveryConfig, SessionConfig
)


class DataLoadError(Exception):
    """Raised when data loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    file_path = Path(file_path)
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}")

    if not isinstance(data, dict):
        raise DataLoadError(f"Expected a mapping at the top of {file_path}")
    return data


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        # Schema validation is optional when no schema ships with the data
        return

    try:
        with open(schema_path, 'r') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}")


def parse_game_config(data: dict, source: str = "<dict>") -> GameConfig:
    """
    Build a GameConfig from a parsed (and validated) dict.

    Missing sections and keys fall back to the dataclass defaults.
    """
    try:
        fish_data = dict(data.get('fish', {}))
        lanes_data = fish_data.pop('lanes', None)
        fish = FishConfig(**fish_data)
        if lanes_data is not None:
            fish.lanes = [LaneConfig(**lane) for lane in lanes_data]

        config = GameConfig(
            name=data.get('name', 'default'),
            play_field=FieldConfig(**data.get('field', {})),
            fish=fish,
            agent=AgentConfig(**data.get('agent', {})),
            hand=HandConfig(**data.get('hand', {})),
            bowl=BowlConfig(**data.get('bowl', {})),
            delivery=DeliveryConfig(**data.get('delivery', {})),
            session=SessionConfig(**data.get('session', {})),
            description=data.get('description')
        )
    except TypeError as e:
        raise DataLoadError(f"Invalid game configuration in {source}: {e}")

    check_game_config(config, source)
    return config


def check_game_config(config: GameConfig, source: str = "<config>"):
    """Cross-field rules a JSON schema cannot express"""
    fish = config.fish
    if fish.floor >= fish.ceiling:
        raise DataLoadError(
            f"{source}: population floor ({fish.floor}) must be below ceiling ({fish.ceiling})"
        )

    agent = config.agent
    if agent.zone_top >= agent.zone_bottom:
        raise DataLoadError(
            f"{source}: agent zone_top ({agent.zone_top}) must be above zone_bottom ({agent.zone_bottom})"
        )

    if not fish.lanes:
        raise DataLoadError(f"{source}: at least one fish lane is required")

    names = set()
    for lane in fish.lanes:
        if lane.y_min > lane.y_max:
            raise DataLoadError(f"{source}: lane '{lane.name}' has y_min > y_max")
        if lane.direction not in (-1, 1):
            raise DataLoadError(f"{source}: lane '{lane.name}' direction must be -1 or 1")
        if lane.name in names:
            raise DataLoadError(f"{source}: duplicate lane name '{lane.name}'")
        names.add(lane.name)


def load_game_config(file_path: Path, schema_dir: Optional[Path] = None) -> GameConfig:
    """Load game configuration from YAML"""
    file_path = Path(file_path)
    data = load_yaml(file_path)

    # Validate if schema available
    if schema_dir:
        schema_path = Path(schema_dir) / "game.schema.json"
        validate_against_schema(data, schema_path, file_path)

    return parse_game_config(data, str(file_path))


def load_default_config(data_root: Path, schema_dir: Optional[Path] = None) -> GameConfig:
    """Load data_root/game/default.yaml (schemas default to data_root/schemas)"""
    data_root = Path(data_root)
    if schema_dir is None:
        schema_dir = data_root / "schemas"
    return load_game_config(data_root / "game" / "default.yaml", schema_dir)
