"""
CLI for json2k8s - Kubernetes manifest generator for JSON app descriptors.

Commands:
    build       Generate manifests for all (or one) descriptors
    validate    Validate descriptors against the schema
    list        List descriptors in a config directory
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__, constants
from .build import BuildOptions, run_build
from .errors import DescriptorValidationError, Json2K8sError
from .schema import find_descriptor_files, load_descriptors, read_descriptor, validate_descriptor
from .secrets import SECRET_SOURCES, create_secret_source
from .types import Environment


class InputError(Exception):
    """Pre-flight check failure."""


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="json2k8s",
        description="Generate Kubernetes manifests from JSON app descriptors",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # build command
    build_parser = subparsers.add_parser(
        "build",
        help="Generate manifests for descriptors in a config directory",
    )
    build_parser.add_argument(
        "config_dir",
        help="Directory containing JSON descriptors",
    )
    build_parser.add_argument(
        "-a", "--app",
        help="Specific app to build (builds all if not specified)",
    )
    build_parser.add_argument(
        "-o", "--out",
        default="build",
        help="Output directory for generated manifests (default: build)",
    )
    build_parser.add_argument(
        "-s", "--secrets-dir",
        default="secrets",
        help="Directory containing <env>.secret.json files (default: secrets)",
    )
    build_parser.add_argument(
        "--secret-source",
        choices=sorted(SECRET_SOURCES),
        default="sops",
        help="How secret files are read (default: sops)",
    )
    build_parser.add_argument(
        "--domain",
        default=constants.ingress_domain(),
        help=f"Ingress base domain (default: {constants.ingress_domain()})",
    )
    build_parser.add_argument(
        "--registry",
        default=constants.registry(),
        help="Image registry used with imageTag",
    )

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate descriptors",
    )
    validate_parser.add_argument(
        "config_dir",
        help="Directory containing JSON descriptors",
    )
    validate_parser.add_argument(
        "-a", "--app",
        help="Specific app to validate",
    )

    # list command
    list_parser = subparsers.add_parser(
        "list",
        help="List descriptors",
    )
    list_parser.add_argument(
        "config_dir",
        help="Directory containing JSON descriptors",
    )
    list_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def validate_config_dir(config_dir: str, app_name: Optional[str] = None) -> None:
    """
    Check the config directory before building.

    Raises:
        InputError: If the directory or the requested descriptor is missing
    """
    path = Path(config_dir)
    if not path.exists():
        raise InputError(f'Config directory "{config_dir}" does not exist')
    if not path.is_dir():
        raise InputError(f'"{config_dir}" is not a directory')

    if app_name:
        app_file = path / f"{app_name}.json"
        if not app_file.exists():
            raise InputError(f'App file "{app_file}" does not exist')
    elif not find_descriptor_files(config_dir):
        raise InputError(f'No JSON files found in directory "{config_dir}"')


def validate_secrets_dir(secrets_dir: str) -> None:
    if not Path(secrets_dir).is_dir():
        raise InputError(
            f'Secrets directory "{secrets_dir}" does not exist. Make sure it contains '
            + " and ".join(
                constants.SECRETS_FILENAME_TEMPLATE.format(env=e.value) for e in Environment
            )
        )


def cmd_build(args: argparse.Namespace) -> int:
    """Handle build command."""
    print(f"Processing config directory: {args.config_dir}", file=sys.stderr)
    if args.app:
        print(f"Building app: {args.app}", file=sys.stderr)
    else:
        print("Building all apps in directory", file=sys.stderr)

    try:
        validate_config_dir(args.config_dir, args.app)
        validate_secrets_dir(args.secrets_dir)
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    options = BuildOptions(
        config_dir=args.config_dir,
        build_dir=args.out,
        app_name=args.app,
        secrets_dir=args.secrets_dir,
        secret_source=create_secret_source(args.secret_source),
        ingress_domain=args.domain,
        registry=args.registry,
    )

    try:
        written = run_build(options)
    except (Json2K8sError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Generated {len(written)} manifests in: {args.out}", file=sys.stderr)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    try:
        validate_config_dir(args.config_dir, args.app)
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    failed = 0
    for path in find_descriptor_files(args.config_dir, args.app):
        try:
            errors = validate_descriptor(read_descriptor(path))
        except DescriptorValidationError as e:
            errors = [m for messages in e.errors.values() for m in messages]

        if errors:
            failed += 1
            print(f"{path.name}: invalid", file=sys.stderr)
            for error in errors:
                print(f"  - {error}", file=sys.stderr)
        else:
            print(f"✓ {path.name} is valid")

    return 1 if failed else 0


def cmd_list(args: argparse.Namespace) -> int:
    """Handle list command."""
    try:
        validate_config_dir(args.config_dir)
        descriptors = load_descriptors(args.config_dir)
    except (InputError, DescriptorValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    rows = [
        {
            "name": d.name,
            "type": d.type.value,
            "team": d.team,
            "environments": [e.value for e in Environment if d.get_env(e) is not None],
        }
        for d in descriptors
    ]

    if args.json:
        print(json.dumps(rows, indent=2))
        return 0

    if not rows:
        print("No apps found")
        return 0

    print(f"{'NAME':<25} {'TYPE':<12} {'TEAM':<15} {'ENVIRONMENTS':<15}")
    print("-" * 70)
    for row in rows:
        envs = ",".join(row["environments"]) or "-"
        print(f"{row['name']:<25} {row['type']:<12} {row['team']:<15} {envs:<15}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "build": cmd_build,
        "validate": cmd_validate,
        "list": cmd_list,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
