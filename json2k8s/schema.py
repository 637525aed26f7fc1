"""
Schema loading and validation for application descriptors.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from .errors import DescriptorValidationError
from .types import AppDescriptor, AppType, parse_descriptor

logger = logging.getLogger(__name__)

SCHEMA_FILENAME = "app-descriptor.schema.json"

# Descriptor type tag -> schema definition validating that variant
VARIANT_DEFINITIONS = {
    AppType.DEPLOYMENT.value: "DeploymentApp",
    AppType.CRONJOB.value: "CronJobApp",
}


def get_schema_path() -> Path:
    """Get path to the bundled JSON schema file."""
    return Path(__file__).parent / "schemas" / SCHEMA_FILENAME


def load_schema() -> Dict[str, Any]:
    """Load the JSON schema for application descriptors."""
    with open(get_schema_path()) as f:
        return json.load(f)


def _variant_validator(schema: Dict[str, Any], definition: str) -> jsonschema.Draft7Validator:
    variant_schema = {
        "$schema": schema["$schema"],
        "definitions": schema["definitions"],
        "allOf": [{"$ref": f"#/definitions/{definition}"}],
    }
    return jsonschema.Draft7Validator(variant_schema)


def _format_error(error: jsonschema.ValidationError) -> str:
    path = ".".join(str(p) for p in error.absolute_path)
    message = error.message
    if error.validator == "anyOf" and "x-message" in error.schema:
        message = error.schema["x-message"]
    return f"{path}: {message}" if path else message


def validate_descriptor(data: Any) -> List[str]:
    """
    Validate one decoded descriptor against the schema of its variant.

    Returns list of validation errors (empty if valid).
    """
    if not isinstance(data, dict):
        return [f"descriptor must be an object, got {type(data).__name__}"]

    app_type = data.get("type")
    definition = VARIANT_DEFINITIONS.get(app_type) if isinstance(app_type, str) else None
    if definition is None:
        allowed = ", ".join(repr(t) for t in VARIANT_DEFINITIONS)
        return [f"type: {app_type!r} is not one of [{allowed}]"]

    validator = _variant_validator(load_schema(), definition)
    errors = sorted(
        validator.iter_errors(data),
        key=lambda e: [str(p) for p in e.absolute_path],
    )
    return [_format_error(e) for e in errors]


def parse_validated(data: Any, source: str = "<descriptor>") -> AppDescriptor:
    """
    Validate and parse a decoded descriptor.

    Raises:
        DescriptorValidationError: If validation fails
    """
    errors = validate_descriptor(data)
    if errors:
        raise DescriptorValidationError({source: errors})
    return parse_descriptor(data)


def read_descriptor(path: Path) -> Any:
    """
    Read and JSON-decode one descriptor file.

    Raises:
        DescriptorValidationError: If the file is not valid UTF-8 JSON
    """
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise DescriptorValidationError({path.stem: [f"invalid JSON: {e}"]}) from e
    except UnicodeDecodeError as e:
        raise DescriptorValidationError({path.stem: [f"invalid UTF-8: {e}"]}) from e


def load_descriptor(path: str) -> AppDescriptor:
    """
    Load, validate and parse a single descriptor file.

    Args:
        path: Path to the JSON descriptor

    Returns:
        Parsed descriptor

    Raises:
        FileNotFoundError: If the file does not exist
        DescriptorValidationError: If validation fails
    """
    descriptor_path = Path(path)
    if not descriptor_path.exists():
        raise FileNotFoundError(f"Descriptor not found at {path}")
    return parse_validated(read_descriptor(descriptor_path), descriptor_path.stem)


def find_descriptor_files(config_dir: str, app_name: Optional[str] = None) -> List[Path]:
    """
    List descriptor files to build.

    Args:
        config_dir: Directory holding ``*.json`` descriptors
        app_name: Only return ``<app_name>.json`` when set

    Returns:
        Descriptor paths, sorted by file name
    """
    directory = Path(config_dir)
    if app_name:
        return [directory / f"{app_name}.json"]
    return sorted(p for p in directory.iterdir() if p.suffix == ".json" and p.is_file())


def load_descriptors(
    config_dir: str,
    app_name: Optional[str] = None,
) -> List[AppDescriptor]:
    """
    Load and validate every descriptor in a directory.

    All files are validated before anything is returned, so a single bad
    descriptor fails the whole load and the error lists the problems of
    every invalid file.

    Args:
        config_dir: Directory holding ``*.json`` descriptors
        app_name: Only load ``<app_name>.json`` when set

    Returns:
        Parsed descriptors in file name order

    Raises:
        FileNotFoundError: If a requested descriptor does not exist
        DescriptorValidationError: If any descriptor is invalid or two
            descriptors declare the same app name
    """
    failures: Dict[str, List[str]] = {}
    descriptors: List[AppDescriptor] = []
    declared: Dict[str, str] = {}  # app name -> file declaring it

    for path in find_descriptor_files(config_dir, app_name):
        if not path.exists():
            raise FileNotFoundError(f"Descriptor not found at {path}")
        try:
            data = read_descriptor(path)
        except DescriptorValidationError as e:
            failures.update(e.errors)
            continue

        errors = validate_descriptor(data)
        if errors:
            failures[path.stem] = errors
            continue

        descriptor = parse_descriptor(data)
        if descriptor.name != path.stem:
            logger.warning(
                f"Descriptor {path.name} declares name '{descriptor.name}'; "
                f"output will be written under '{descriptor.name}'"
            )
        if descriptor.name in declared:
            failures[path.stem] = [
                f"name: '{descriptor.name}' is already declared by {declared[descriptor.name]}"
            ]
            continue
        declared[descriptor.name] = path.name
        descriptors.append(descriptor)

    if failures:
        raise DescriptorValidationError(failures)

    logger.debug(f"Loaded {len(descriptors)} descriptors from {config_dir}")
    return descriptors
