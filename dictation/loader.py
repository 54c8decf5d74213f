"""
YAML data loader with schema validation.

Loads the solar system configuration and planet definitions from YAML
files and validates them against JSON schemas.
"""

import yaml
import json
from pathlib import Path
from typing import Dict, Optional
import jsonschema

from .resources import ResourceVector
from .data_types import (
    PlanetaryState, PlanetDefinition, SimulationConfig, ReferenceConfig,
    PlanetReference, SolarSystem
)
from .constants import RESOURCE_NAMES


class DataLoadError(Exception):
    """Raised when data loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}")

    if not isinstance(data, dict):
        raise DataLoadError(f"Expected a mapping at top level of {file_path}")
    return data


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        # Schema validation is optional
        return

    try:
        with open(schema_path, 'r') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}")


def parse_resources(data: dict, data_path: Path) -> ResourceVector:
    """Parse a resource mapping, rejecting unknown or negative entries"""
    for name, value in data.items():
        if name not in RESOURCE_NAMES:
            raise DataLoadError(f"Unknown resource {name!r} in {data_path}")
        if value < 0:
            raise DataLoadError(f"Negative {name} ({value}) in {data_path}")
    return ResourceVector.from_dict(data)


def load_planet(file_path: Path, schema_dir: Optional[Path] = None) -> PlanetDefinition:
    """Load planet definition from YAML"""
    data = load_yaml(file_path)

    # Validate if schema available
    if schema_dir:
        schema_path = schema_dir / "planet.schema.json"
        validate_against_schema(data, schema_path, file_path)

    if data['period'] <= 0:
        raise DataLoadError(f"Orbital period must be positive in {file_path}")

    state = PlanetaryState(
        gravity=float(data['gravity']),
        distance=float(data['distance']),
        period=float(data['period']),
        theta=float(data.get('theta', 0.0)),
        initial_resources=parse_resources(data['initial_resources'], file_path)
    )

    available = None
    if 'available' in data:
        available = parse_resources(data['available'], file_path)

    return PlanetDefinition(
        name=data['name'],
        state=state,
        available=available,
        description=data.get('description')
    )


def load_solar_system(file_path: Path, schema_dir: Optional[Path] = None) -> SolarSystem:
    """Load solar system configuration from YAML"""
    data = load_yaml(file_path)

    # Validate if schema available
    if schema_dir:
        schema_path = schema_dir / "solar_system.schema.json"
        validate_against_schema(data, schema_path, file_path)

    simulation = SimulationConfig(**data.get('simulation', {}))

    ref_data = dict(data['reference'])
    resources = parse_resources(ref_data.pop('resources'), file_path)
    reference = ReferenceConfig(resources=resources, **ref_data)

    if resources.population <= 0:
        raise DataLoadError(f"Reference population must be positive in {file_path}")
    if resources.water <= 0 or resources.food <= 0:
        raise DataLoadError(f"Reference water and food must be positive in {file_path}")
    # Productivity divides by the reference QOL per capita (sqrt(1) - factor, twice)
    if (1.0 - simulation.thirst_factor) + (1.0 - simulation.hunger_factor) <= 0:
        raise DataLoadError(f"Reference quality of life must be positive in {file_path}")

    planets = [PlanetReference(**p) for p in data['planets']]

    return SolarSystem(
        system_id=data['system_id'],
        name=data['name'],
        simulation=simulation,
        reference=reference,
        planets=planets,
        description=data.get('description')
    )


def load_planet_registry(system: SolarSystem, data_root: Path,
                         schema_dir: Optional[Path] = None) -> Dict[str, PlanetDefinition]:
    """Load every enabled planet referenced by the solar system"""
    registry = {}
    for planet_ref in system.planets:
        if not planet_ref.enabled:
            continue
        planet_path = data_root / planet_ref.file_path
        definition = load_planet(planet_path, schema_dir)
        if definition.name in registry:
            raise DataLoadError(f"Duplicate planet name {definition.name!r} in {planet_path}")
        registry[definition.name] = definition

    if not registry:
        raise DataLoadError(f"No enabled planets in {system.system_id}")

    return registry


def load_all_data(data_root: Path, schema_dir: Optional[Path] = None) -> dict:
    """Load all simulation data from data directory

    Returns dict with keys: system, planets
    """
    data_root = Path(data_root)

    # Load solar system
    system = load_solar_system(data_root / "world" / "solar_system.yaml", schema_dir)

    # Load planets (referenced in system config)
    planets = load_planet_registry(system, data_root, schema_dir)

    return {
        'system': system,
        'planets': planets
    }
