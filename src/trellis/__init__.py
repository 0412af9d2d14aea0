"""
Trellis - Node-link diagrams of JSON documents.

Turns an arbitrary nested JSON document into a tree of nodes and
connections, lays it out without overlaps and fits it into a viewport.
"""

__version__ = "1.0.0"

from trellis.core.config import TrellisConfig
from trellis.core.session import DiagramSession

__all__ = ["DiagramSession", "TrellisConfig", "__version__"]
