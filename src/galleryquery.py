"""galleryquery - find and download packages from V2 (OData) package galleries.

    Returns:
        int: Exit code
"""
import json
import logging
import shutil
import sys

from args import parse_args
from cli_config import apply_overrides, load_repositories, select_repository
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes
from registry import ErrorCategory, FindResults, ServerAPICall, get_server_api_call
from registry.errors import GalleryError
from versioning.models import VersionMode
from versioning.parser import normalize_version, parse_version_request

logger = logging.getLogger(__name__)

_EXIT_BY_CATEGORY = {
    ErrorCategory.CONNECTION_ERROR: ExitCodes.CONNECTION_ERROR,
    ErrorCategory.INVALID_DATA: ExitCodes.DATA_ERROR,
    ErrorCategory.INVALID_ARGUMENT: ExitCodes.INVALID_INPUT,
    ErrorCategory.INVALID_OPERATION: ExitCodes.INVALID_INPUT,
}


def _setup_logging(args) -> None:
    """Configure logging from --loglevel / --logfile.

    Without --loglevel the environment setting applies.
    """
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def run_find(client: ServerAPICall, args) -> FindResults:
    """Map find arguments onto the matching client operation."""
    tags = list(getattr(args, "TAGS", None) or [])
    prerelease = bool(getattr(args, "PRERELEASE", False))
    name = getattr(args, "NAME", None)
    version = getattr(args, "VERSION", None)
    latest_only = bool(getattr(args, "LATEST_ONLY", False))

    if getattr(args, "COMMANDS", None):
        return client.find_command_or_dsc_resource(args.COMMANDS, prerelease, True)

    if not name or "*" in name:
        if version:
            logger.warning("--version requires an exact --name; ignoring version '%s'", version)
        if latest_only:
            logger.warning("--latest-only only applies to a version range; ignoring it")
        if not name:
            if tags:
                return client.find_tags(tags, prerelease)
            return client.find_all(prerelease)
        if tags:
            return client.find_name_globbing_with_tag(name, tags, prerelease)
        return client.find_name_globbing(name, prerelease)

    request = parse_version_request(version)
    if latest_only and request.mode != VersionMode.RANGE:
        logger.warning("--latest-only only applies to a version range; ignoring it")
    if request.mode == VersionMode.EXACT:
        if tags:
            return client.find_version_with_tag(name, request.exact, tags)
        return client.find_version(name, request.exact)
    if request.mode == VersionMode.RANGE:
        return client.find_version_globbing(name, request.interval, prerelease, latest_only)
    if tags:
        return client.find_name_with_tag(name, tags, prerelease)
    return client.find_name(name, prerelease)


def _write_pages(result: FindResults, path: str) -> None:
    with open(path, "w", encoding="utf-8") as file:
        json.dump({"responses": result.responses, "responseType": result.response_type.value}, file)
    logger.info("Wrote %d page(s) to %s", len(result), path)


def _exit_code(category: ErrorCategory) -> int:
    return _EXIT_BY_CATEGORY.get(category, ExitCodes.INVALID_INPUT).value


def main(argv=None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)
    apply_overrides(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action),
        )

    repositories = load_repositories(getattr(args, "CONFIG", None))
    repo = select_repository(repositories, getattr(args, "REPOSITORY", None), getattr(args, "URI", None))
    if repo is None:
        logger.error("Repository not found: %s", args.REPOSITORY)
        return ExitCodes.INVALID_INPUT.value

    try:
        client = get_server_api_call(repo)
    except GalleryError as e:
        logger.error("%s", e)
        return _exit_code(e.category)

    with client:
        if args.action == "install":
            return _install(client, args)

        try:
            result = run_find(client, args)
        except GalleryError as e:  # malformed --version
            logger.error("%s", e)
            return _exit_code(e.category)

    if args.OUTPUT:
        _write_pages(result, args.OUTPUT)
    else:
        for page in result.responses:
            sys.stdout.write(page)
            sys.stdout.write("\n")

    if result.error is not None:
        logger.error("Find stopped after %d page(s): %s", len(result), result.error)
        return _exit_code(result.error.category)
    logger.info("Fetched %d page(s) from %s", len(result), repo.name)
    return ExitCodes.SUCCESS.value


def _install(client: ServerAPICall, args) -> int:
    version = None
    if args.VERSION:
        try:
            version = normalize_version(args.VERSION)
        except GalleryError as e:
            logger.error("%s", e)
            return _exit_code(e.category)

    if version:
        result = client.install_version(args.NAME, version)
    else:
        result = client.install_name(args.NAME, False)

    if result.error is not None:
        logger.error("%s", result.error)
        return _exit_code(result.error.category)

    path = args.OUTPUT or f"{args.NAME}{'.' + version if version else ''}.nupkg"
    try:
        with open(path, "wb") as file:
            shutil.copyfileobj(result.stream, file)
    except OSError as e:
        logger.error("Could not write %s: %s", path, e)
        return ExitCodes.FILE_ERROR.value
    logger.info("Saved %s", path)
    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
