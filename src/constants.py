"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    INVALID_INPUT = 1
    CONNECTION_ERROR = 2
    FILE_ERROR = 3
    DATA_ERROR = 4


class ApiVersion(Enum):
    """Server protocol families a repository can speak.

    Args:
        Enum (string): Protocol family identifiers used in repository config.
    """

    V2 = "v2"
    V3 = "v3"


class FindResponseType(Enum):
    """Shape of the payloads carried by a find result.

    Args:
        Enum (string): Response shape tag.
    """

    RESPONSE_STRING = "string"
    RESPONSE_HASHTABLE = "hashtable"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    DEFAULT_REPOSITORY_NAME = "PSGallery"
    DEFAULT_REPOSITORY_URI = "https://www.powershellgallery.com/api/v2"
    SUPPORTED_API_VERSIONS = [ApiVersion.V2.value, ApiVersion.V3.value]

    # Page sizes per query variant
    FIND_ALL_BATCH_SIZE = 6000
    FIND_BATCH_SIZE = 100
    LATEST_BATCH_SIZE = 1

    ORDER_BY_ID = "Id desc"
    ORDER_BY_VERSION = "NormalizedVersion desc"
    ODATA_METADATA_NS = "http://schemas.microsoft.com/ado/2007/08/dataservices/metadata"

    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    USER_AGENT = "galleryquery/0.1"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "GALLERYQUERY_LOG_LEVEL"
    ENV_USERNAME = "GALLERYQUERY_USERNAME"
    ENV_PASSWORD = "GALLERYQUERY_PASSWORD"
