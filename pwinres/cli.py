# SPDX-License-Identifier: MIT
"""Command-line interface for pwinres."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import os
import sys
from pathlib import Path

from pwinres.configure.environment import BuildEnvironment, _reset_vars
from pwinres.configure.metadata import PackageMetadata
from pwinres.core.errors import PwinresError
from pwinres.core.resource import VersionInfo, WindowsResource
from pwinres.toolkits.locator import RegistryLocator

# Set up logging
logger = logging.getLogger("pwinres")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def parse_variables(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Parse KEY=value arguments from a list.

    Args:
        args: List of arguments.

    Returns:
        Tuple of (variables dict, remaining args).
    """
    variables: dict[str, str] = {}
    remaining: list[str] = []

    for arg in args:
        if "=" in arg and not arg.startswith("-"):
            key, _, value = arg.partition("=")
            if key:  # Valid KEY=value
                variables[key] = value
            else:
                remaining.append(arg)
        else:
            remaining.append(arg)

    return variables, remaining


def export_variables(variables: dict[str, str]) -> None:
    """Make KEY=value variables visible to get_var() via PWINRES_VARS."""
    if not variables:
        return
    current = os.environ.get("PWINRES_VARS")
    merged: dict[str, str] = {}
    if current:
        try:
            loaded = json.loads(current)
        except json.JSONDecodeError:
            loaded = {}
        if isinstance(loaded, dict):
            merged.update(loaded)
    merged.update(variables)
    os.environ["PWINRES_VARS"] = json.dumps(merged)
    _reset_vars()


def _property_arg(value: str) -> tuple[str, str]:
    name, sep, text = value.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {value!r}")
    return name, text


def _version_info_arg(value: str) -> tuple[VersionInfo, int]:
    name, sep, number = value.partition("=")
    try:
        info = VersionInfo[name.upper()]
    except KeyError:
        choices = ", ".join(v.name for v in VersionInfo)
        raise argparse.ArgumentTypeError(
            f"unknown version field {name!r} (expected one of: {choices})"
        ) from None
    if not sep:
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got {value!r}")
    try:
        return info, int(number, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {number!r}") from None


def _int_arg(value: str) -> int:
    try:
        return int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None


def load_environment(args: argparse.Namespace) -> BuildEnvironment:
    """Build the environment record, applying command-line overrides."""
    env = BuildEnvironment.from_environ()
    changes: dict[str, object] = {}
    if args.project_dir:
        changes["project_dir"] = Path(args.project_dir)
    if args.output_dir:
        changes["out_dir"] = Path(args.output_dir)
    if args.toolkit:
        changes["toolkit"] = args.toolkit.lower()
    if args.toolkit_path:
        changes["toolkit_path"] = Path(args.toolkit_path)
    if args.windres:
        changes["windres"] = args.windres
    if args.ar:
        changes["ar"] = args.ar
    return dataclasses.replace(env, **changes)


def load_metadata(args: argparse.Namespace, env: BuildEnvironment) -> PackageMetadata:
    """Read metadata from pyproject.toml, or PWINRES_PKG_* without one."""
    if args.pyproject:
        return PackageMetadata.from_pyproject(args.pyproject)
    return PackageMetadata.for_project(env.project_dir)


def build_resource(args: argparse.Namespace) -> WindowsResource:
    """Create the resource descriptor described by the arguments."""
    variables, remaining = parse_variables(getattr(args, "extra", []))
    if remaining:
        raise PwinresError(f"unexpected arguments: {' '.join(remaining)}")
    export_variables(variables)

    env = load_environment(args)
    res = WindowsResource.new(env, load_metadata(args, env))

    for name, value in args.properties:
        res = res.with_property(name, value)
    for info, value in args.version_info:
        res = res.with_version_info(info, value)
    for path in args.icons:
        res = res.with_icon(path)
    for name_id, path in args.icon_ids:
        res = res.with_icon_id(path, name_id)
    if args.language is not None:
        res = res.with_language(args.language)
    if args.manifest_file:
        res = res.with_manifest_file(args.manifest_file)
    if args.resource_file:
        res = res.with_resource_file(args.resource_file)
    for content in args.append:
        res = res.with_append_rc_content(content)
    if args.add_toolkit_include:
        res = res.with_add_toolkit_include(True)
    return res


def cmd_render(args: argparse.Namespace) -> int:
    """Write the generated resource file to a file or stdout."""
    setup_logging(args.verbose, args.debug)

    try:
        res = build_resource(args)
        if args.output:
            path = res.write_resource_file(args.output)
            logger.info("Wrote %s", path)
        else:
            sys.stdout.write(res.render())
    except (PwinresError, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0


def cmd_compile(args: argparse.Namespace) -> int:
    """Generate and compile the resource, then print the link report."""
    setup_logging(args.verbose, args.debug)

    try:
        res = build_resource(args)
        report = res.compile(prefix=args.report_prefix)
    except (PwinresError, OSError) as e:
        logger.error("%s", e)
        return 1
    logger.info("Compiled %s", report.artifact)
    return 0


def cmd_find_sdk(args: argparse.Namespace) -> int:
    """Print the Windows SDK bin directories found in the registry."""
    setup_logging(args.verbose, args.debug)

    try:
        width = args.pointer_width or BuildEnvironment.from_environ().pointer_width
        found = RegistryLocator(pointer_width=width).find()
    except PwinresError as e:
        logger.error("%s", e)
        return 1
    for path in found:
        print(path)
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")


def add_resource_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments describing the resource."""
    parser.add_argument(
        "-C", "--project-dir", help="Project directory (default: current dir)"
    )
    parser.add_argument(
        "--pyproject", help="pyproject.toml to read (default: in project dir)"
    )
    parser.add_argument(
        "-s",
        "--set",
        dest="properties",
        metavar="NAME=VALUE",
        type=_property_arg,
        action="append",
        default=[],
        help="Set a string property (repeatable)",
    )
    parser.add_argument(
        "--version-info",
        metavar="FIELD=VALUE",
        type=_version_info_arg,
        action="append",
        default=[],
        help="Set a numeric version field, e.g. FILETYPE=2 (repeatable)",
    )
    parser.add_argument(
        "--icon",
        dest="icons",
        metavar="PATH",
        action="append",
        default=[],
        help="Add an icon with id 1 (repeatable)",
    )
    parser.add_argument(
        "--icon-id",
        dest="icon_ids",
        metavar=("ID", "PATH"),
        nargs=2,
        action="append",
        default=[],
        help="Add an icon with an explicit id (repeatable)",
    )
    parser.add_argument(
        "--language", type=_int_arg, help="Language id, e.g. 0x0409"
    )
    parser.add_argument("--manifest-file", help="Manifest file to embed")
    parser.add_argument(
        "--resource-file", help="Compile this .rc file instead of generating one"
    )
    parser.add_argument(
        "--append",
        metavar="TEXT",
        action="append",
        default=[],
        help="Append raw text to the resource file (repeatable)",
    )
    parser.add_argument("-o", "--output-dir", help="Output directory")
    parser.add_argument("--toolkit", help="Toolkit: gnu or msvc")
    parser.add_argument("--toolkit-path", help="Toolkit directory")
    parser.add_argument("--windres", help="windres executable (GNU)")
    parser.add_argument("--ar", help="ar executable (GNU)")
    parser.add_argument(
        "--add-toolkit-include",
        action="store_true",
        help="Pass the SDK include directories to rc.exe (MSVC)",
    )
    parser.add_argument(
        "extra",
        nargs="*",
        help="Build variables (KEY=value)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the pwinres CLI."""
    parser = argparse.ArgumentParser(
        prog="pwinres",
        description="Generate and compile Windows resources.",
        epilog="Run 'pwinres <command> --help' for command-specific help.",
    )
    from pwinres import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # pwinres render
    render_parser = subparsers.add_parser(
        "render", help="Write the generated resource file"
    )
    add_common_args(render_parser)
    add_resource_args(render_parser)
    render_parser.add_argument(
        "--out", dest="output", help="File to write (default: stdout)"
    )
    render_parser.set_defaults(func=cmd_render)

    # pwinres compile
    compile_parser = subparsers.add_parser(
        "compile", help="Generate and compile the resource"
    )
    add_common_args(compile_parser)
    add_resource_args(compile_parser)
    compile_parser.add_argument(
        "--report-prefix",
        help="Prefix for the link report lines (default: PWINRES_REPORT_PREFIX)",
    )
    compile_parser.set_defaults(func=cmd_compile)

    # pwinres find-sdk
    sdk_parser = subparsers.add_parser(
        "find-sdk", help="List Windows SDK directories holding rc.exe"
    )
    add_common_args(sdk_parser)
    sdk_parser.add_argument(
        "--pointer-width",
        type=int,
        choices=[32, 64],
        default=None,
        help="Target word size (default: PWINRES_POINTER_WIDTH or host)",
    )
    sdk_parser.set_defaults(func=cmd_find_sdk)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    # Run the specified command
    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
