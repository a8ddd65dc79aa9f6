"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    SYNC_ERROR = 4


class PackageManagers(Enum):
    """Package managers supported by the program.

    Args:
        Enum (string): Package managers supported by the program.
    """

    NPM = "npm"
    PYPI = "pypi"
    MAVEN = "maven"


class DependencySchemes(Enum):
    """Schemes under which the version store records each ecosystem."""

    JVM_PACKAGES = "semanticdb"
    NPM_PACKAGES = "npm"
    PYTHON_PACKAGES = "python"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_PYPI = "https://pypi.org/pypi/"
    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    REGISTRY_URL_MAVEN = "https://repo1.maven.org/maven2"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    DOWNLOAD_CHUNK_SIZE = 64 * 1024
    ENV_NPM_TOKEN = "DEPSYNC_NPM_TOKEN"

    # DO NOT CHANGE. Every synthetic commit hash depends on this timestamp.
    STABLE_GIT_COMMIT_DATE = "Thu Apr 8 14:24:52 2021 +0200"
    GIT_EMAIL = "packages@depsync.local"
    GIT_AUTHOR_SUFFIX = " authors"
    LATEST_REF = "latest"
    GIT_METADATA_DIR = ".git"

    JVM_MAJOR_VERSION_0 = 44
    LSIF_JAVA_JSON = "lsif-java.json"
    JDK_GROUP_ID = "jdk"
    JDK_ARTIFACT_ID = "jdk"

    # Only used for the author identity of commands that create no commits.
    PLACEHOLDER_MAVEN_DEPENDENCY = "io.depsync:placeholder:1.0.0"
    PLACEHOLDER_NPM_DEPENDENCY = "depsync-placeholder@1.0.0"
    PLACEHOLDER_PYTHON_DEPENDENCY = "depsync-placeholder==1.0.0"
