"""Exception hierarchy for srdn-dist."""


class DistError(Exception):
    """Base exception for packaging failures"""

    pass


class ConfigurationError(DistError):
    """Raised when configuration is invalid"""

    pass


class PlatformError(DistError):
    """Raised when a target triple cannot be split into its fields"""

    pass


class ManifestError(DistError):
    """Raised when the project descriptor is missing or malformed"""

    pass


class MissingArtifactError(DistError):
    """Raised when a prebuilt binary is absent from the artifacts directory"""

    def __init__(self, triple: str, path):
        super().__init__(f"Prebuilt binary for {triple} not found: {path}")
        self.triple = triple
        self.path = path
