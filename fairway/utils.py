"""Utility functions for file I/O and number formatting."""

import json
import logging
import math
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('fairway.utils')


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round halves away from negative infinity (2.25 -> 2.3, -4.5 -> -4).

    League results are published with one decimal and must match what a
    person with a calculator gets, so Python's round-half-even is not used.

    Args:
        value: Number to round
        digits: Decimal places to keep (default: 0)

    Returns:
        Rounded value
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load JSON file with optional schema validation.

    Args:
        path: Path to JSON file (str or Path object)
        schema: Optional Pydantic model to validate against

    Returns:
        Parsed JSON (validated if schema provided)

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        ValueError: If schema validation fails

    Example:
        from fairway.schemas import LeagueConfigFile
        config = load_json('data/league_config.json', schema=LeagueConfigFile)
    """
    path = Path(path)

    logger.debug(f'Loading JSON from: {path}')

    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    if schema:
        try:
            validated = schema.model_validate(data)
            logger.debug(f'Schema validation passed for: {path}')
            return validated
        except ValidationError as e:
            logger.error(f'Schema validation failed for {path}: {e}')
            raise ValueError(f'Schema validation failed for {path}:\n{e}') from e

    return data


def save_json(
    path: Path | str,
    data: Any,
    indent: int = 2,
    create_dirs: bool = True,
) -> None:
    """
    Save data as JSON file.

    Pydantic models are dumped in JSON mode, so enum fields are written as
    their string values.

    Args:
        path: Path to write to (str or Path object)
        data: Data to serialize (JSON-serializable or Pydantic model)
        indent: Indentation level (default: 2 spaces)
        create_dirs: Create parent directories if they don't exist (default: True)

    Raises:
        TypeError: If data is not JSON-serializable
        OSError: If file cannot be written
    """
    path = Path(path)

    logger.debug(f'Saving JSON to: {path}')

    if create_dirs:
        path.parent.mkdir(parents=True, exist_ok=True)

    json_data = data.model_dump(mode='json') if isinstance(data, BaseModel) else data

    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(json_data, f, indent=indent, ensure_ascii=False)
    except TypeError as e:
        logger.error(f'Data is not JSON-serializable: {e}')
        raise TypeError(f'Data is not JSON-serializable: {e}') from e


def validate_json_file(
    path: Path | str,
    schema: type[T],
) -> tuple[bool, str | None]:
    """
    Check a JSON file against a schema.

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        load_json(path, schema=schema)
        return True, None
    except FileNotFoundError:
        return False, f'File not found: {path}'
    except json.JSONDecodeError as e:
        return False, f'Invalid JSON: {e.msg} at position {e.pos}'
    except ValueError as e:
        return False, str(e)
