"""Argument parsing functionality for galleryquery."""

import argparse


def _add_common(parser):
    parser.add_argument("-r", "--repository",
                        dest="REPOSITORY",
                        help="Name of a configured repository (default: first configured)",
                        action="store", type=str)
    parser.add_argument("-u", "--uri",
                        dest="URI",
                        help="Query this V2 gallery URI directly instead of a configured repository",
                        action="store", type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Repository configuration file (YAML or JSON)",
                        action="store", type=str)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help="HTTP request timeout in seconds",
                        action="store", type=int)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: $GALLERYQUERY_LOG_LEVEL or INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file",
                        action="store",
                        type=str)


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="galleryquery",
        description="Query and download packages from V2 (OData) package galleries",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", required=True)

    find = subparsers.add_parser("find", help="Find packages and print the raw result pages")
    _add_common(find)
    find.add_argument("-n", "--name",
                      dest="NAME",
                      help="Package name; '*' wildcards allowed (PowerShell*, *Get, *Shell*, Power*Get)",
                      action="store", type=str)
    find.add_argument("-v", "--version",
                      dest="VERSION",
                      help="Exact version, NuGet range ([1.0, 2.0)) or wildcard (3.*)",
                      action="store", type=str)
    find.add_argument("-t", "--tag",
                      dest="TAGS",
                      help="Tag filter; repeat for several tags",
                      action="append", type=str,
                      default=[])
    find.add_argument("--prerelease",
                      dest="PRERELEASE",
                      help="Include prerelease versions",
                      action="store_true")
    find.add_argument("--latest-only",
                      dest="LATEST_ONLY",
                      help="With a version range, request only the newest matching entry",
                      action="store_true")
    find.add_argument("--command",
                      dest="COMMANDS",
                      help="Find packages exporting a command (not supported on V2 galleries)",
                      action="append", type=str)

    install = subparsers.add_parser("install", help="Download package content")
    _add_common(install)
    install.add_argument("-n", "--name",
                         dest="NAME",
                         help="Package name",
                         action="store", type=str,
                         required=True)
    install.add_argument("-v", "--version",
                         dest="VERSION",
                         help="Exact package version (default: latest stable)",
                         action="store", type=str)

    return parser.parse_args(argv)
