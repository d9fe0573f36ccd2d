"""
Custom exception types for the ryogoku CLI.
"""


class RyogokuClientException(Exception):
    """Base exception for all ryogoku client errors."""
    pass


class KubeConfigError(RyogokuClientException):
    """Raised when the Kubernetes configuration cannot be loaded."""
    pass
