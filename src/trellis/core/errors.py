"""
Exceptions raised by the Trellis core.
"""


class TrellisError(Exception):
    """Base exception for Trellis errors."""
    pass


class GraphError(TrellisError):
    """Structural error in the graph model."""
    pass


class InvalidEndpoint(GraphError):
    """Raised when a connection references a missing port or connection."""

    def __init__(self, message: str, node_id: str = None, port: str = None):
        self.node_id = node_id
        self.port = port
        super().__init__(message)


class DanglingReference(InvalidEndpoint):
    """Raised when a connection endpoint node is not part of the graph."""
    pass


class UnsupportedValueError(TrellisError, TypeError):
    """Raised when a Python value cannot be represented as JSON."""
    pass
