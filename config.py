# config.py

import json

import constants

REQUIRED_KEYS = ('run_id', 'master_seed', 'logging')

# Defaults for the 'fireworks' section. Any key present in config.json wins.
FIREWORKS_DEFAULTS = {
    'message': "Happy Birthday!",
    'font_name': None,
    'pool_size': constants.POOL_SIZE,
    'initial_spawn_interval': constants.INITIAL_SPAWN_INTERVAL,
    'spawn_interval_range': list(constants.SPAWN_INTERVAL_RANGE),
    'bloom': True,
    'stats_interval': 100,
    'max_ticks': 0,
    'profile': False,
}


def load_config(config_path='config.json'):
    """
    Loads and validates the run configuration.

    Data Contract:
    - Inputs: config_path (str) - Path to the JSON configuration file.
    - Outputs: dict - The parsed config with the 'fireworks' section completed
      from FIREWORKS_DEFAULTS.
    - Side Effects: None.
    - Invariants: Raises ValueError if a required top-level key is missing or
      the spawn interval range is not a valid [low, high) pair.
    """
    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Config file {config_path} is not valid JSON: {e}") from e

    missing = [key for key in REQUIRED_KEYS if key not in config]
    if missing:
        raise ValueError(f"Config file {config_path} is missing keys: {', '.join(missing)}")

    fireworks = dict(FIREWORKS_DEFAULTS)
    fireworks.update(config.get('fireworks') or {})

    low, high = fireworks['spawn_interval_range']
    if not 0 < low < high:
        raise ValueError(f"spawn_interval_range must satisfy 0 < low < high, got {[low, high]}")
    if fireworks['pool_size'] < 0:
        raise ValueError(f"pool_size must not be negative, got {fireworks['pool_size']}")
    if not fireworks['message']:
        raise ValueError("message must be a non-empty string")

    config['fireworks'] = fireworks
    return config
