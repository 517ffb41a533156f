"""Project specification loading from YAML or JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from sitematch.models import ProjectSpecification

logger = logging.getLogger(__name__)


class SpecificationError(ValueError):
    """Raised when a project specification file cannot be parsed or validated."""


def load_specification(file_path: Path) -> ProjectSpecification:
    """Load a ProjectSpecification from a YAML or JSON file.

    Args:
        file_path: Path to .yaml, .yml or .json file

    Returns:
        Validated ProjectSpecification

    Raises:
        FileNotFoundError: If file doesn't exist
        SpecificationError: If the file is malformed or fails validation
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Specification not found: {file_path}")

    suffix = file_path.suffix.lower()
    try:
        with open(file_path) as f:
            if suffix == ".json":
                data = json.load(f)
            elif suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                raise SpecificationError(f"Unsupported file format: {file_path.suffix}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise SpecificationError(f"Invalid specification file {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise SpecificationError(f"Expected a mapping in {file_path}, got {type(data)}")

    try:
        spec = ProjectSpecification.model_validate(data)
    except ValidationError as e:
        raise SpecificationError(f"Invalid specification in {file_path}: {e}") from e

    logger.debug(f"Loaded specification {spec.name!r} from {file_path}")
    return spec
