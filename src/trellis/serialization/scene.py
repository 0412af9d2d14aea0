"""
Scene Schema - Renderer payload for a laid-out diagram.

Describes the nodes (with final positions and sizes), their ports, the
connections and the viewport transform in plain JSON-compatible data.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional
import json

from trellis import __version__
from trellis.core.graph_model import GraphModel, Node, Port
from trellis.core.viewport import ViewportTransform

# Current scene format version
SCENE_VERSION = "1.0.0"


@dataclass
class PortSchema:
    """Schema for a node port."""
    name: str
    socket: str

    @classmethod
    def from_port(cls, port: Port) -> "PortSchema":
        return cls(name=port.name, socket=port.socket.name)


@dataclass
class NodeSchema:
    """Schema for a node in the diagram."""
    id: str
    label: str
    position: Dict[str, float]  # {"x": float, "y": float}
    size: Dict[str, float]  # {"width": float, "height": float}
    inputs: List[PortSchema] = field(default_factory=list)
    outputs: List[PortSchema] = field(default_factory=list)

    @classmethod
    def from_node(cls, node: Node) -> "NodeSchema":
        return cls(
            id=node.id,
            label=node.label,
            position={"x": node.position.x, "y": node.position.y},
            size={"width": node.width, "height": node.height},
            inputs=[PortSchema.from_port(p) for p in node.inputs],
            outputs=[PortSchema.from_port(p) for p in node.outputs],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "label": self.label,
            "position": self.position,
            "size": self.size,
            "inputs": [asdict(p) for p in self.inputs],
            "outputs": [asdict(p) for p in self.outputs],
        }


@dataclass
class ConnectionSchema:
    """Schema for a connection between nodes."""
    id: str
    source: str
    source_output: str
    target: str
    target_input: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass
class SceneSchema:
    """Complete renderer payload."""
    nodes: List[NodeSchema] = field(default_factory=list)
    connections: List[ConnectionSchema] = field(default_factory=list)
    viewport: Optional[Dict[str, float]] = None
    version: str = SCENE_VERSION

    @classmethod
    def from_graph(
        cls,
        graph: GraphModel,
        transform: Optional[ViewportTransform] = None,
    ) -> "SceneSchema":
        """Capture the current state of ``graph``."""
        return cls(
            nodes=[NodeSchema.from_node(n) for n in graph.nodes],
            connections=[
                ConnectionSchema(
                    id=c.id,
                    source=c.source,
                    source_output=c.source_output,
                    target=c.target,
                    target_input=c.target_input,
                )
                for c in graph.connections
            ],
            viewport=transform.to_dict() if transform is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": self.version,
            "generator": f"trellis {__version__}",
            "nodes": [n.to_dict() for n in self.nodes],
            "connections": [c.to_dict() for c in self.connections],
            "viewport": self.viewport,
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
