"""Custom exceptions for JoomEngine Image Builder."""


class JoomEngineError(Exception):
    """Base class for all build engine errors."""


class InvalidVersion(JoomEngineError):
    """Raised when a version string does not match the release grammar."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Unparseable version: {version}")


class MissingDigest(JoomEngineError):
    """Raised when a release in a feed has no sha512 digest."""

    def __init__(self, major: str, version: str):
        self.major = major
        self.version = version
        super().__init__(f"Missing SHA for {version} - skipping entire major {major}")


class FeedUnavailable(JoomEngineError):
    """Raised when the update feed of a major cannot be fetched or read."""

    def __init__(self, major: str, reason: str):
        self.major = major
        super().__init__(f"Failed to fetch feed for {major}: {reason}")


class ConfigurationMissing(JoomEngineError):
    """Raised when a required configuration file or key is absent."""


class DockerError(JoomEngineError):
    """Raised when a docker command fails."""
