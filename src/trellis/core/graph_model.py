"""
Graph Model - Nodes, ports, sockets and connections of a diagram.

Pure Python with no Qt dependency. The layout engine populates it, the
arrangement pass moves its nodes, and renderers read it.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union

from trellis.core.errors import DanglingReference, InvalidEndpoint
from trellis.core.types import PortDirection

logger = logging.getLogger(__name__)

DEFAULT_PORT = "port"


@dataclass(frozen=True)
class Socket:
    """Type tag deciding which ports may be connected."""
    name: str

    def is_compatible(self, other: "Socket") -> bool:
        return self.name == other.name


UNIVERSAL_SOCKET = Socket("socket")


@dataclass(frozen=True)
class Port:
    """A named attachment point on a node."""
    name: str
    socket: Socket
    direction: PortDirection

    @property
    def is_output(self) -> bool:
        return self.direction == PortDirection.OUTPUT


@dataclass(frozen=True)
class Position:
    """Top-left corner of a node in model space."""
    x: float = 0.0
    y: float = 0.0

    def as_tuple(self) -> Tuple[float, float]:
        return self.x, self.y


class Node:
    """
    One vertex of the diagram.

    The id and ports are fixed at creation; the position can change at any
    time (synthesis, arrangement, transitions, user drags).
    """

    DEFAULT_WIDTH = 200.0
    DEFAULT_HEIGHT = 100.0

    def __init__(
        self,
        node_id: str,
        label: str,
        width: float = DEFAULT_WIDTH,
        height: float = DEFAULT_HEIGHT,
        socket: Socket = UNIVERSAL_SOCKET,
    ):
        self._id = node_id
        self.label = label
        self.width = float(width)
        self.height = float(height)
        self._inputs: Dict[str, Port] = {
            DEFAULT_PORT: Port(DEFAULT_PORT, socket, PortDirection.INPUT)
        }
        self._outputs: Dict[str, Port] = {
            DEFAULT_PORT: Port(DEFAULT_PORT, socket, PortDirection.OUTPUT)
        }
        self._position = Position()

    @property
    def id(self) -> str:
        return self._id

    @property
    def inputs(self) -> List[Port]:
        return list(self._inputs.values())

    @property
    def outputs(self) -> List[Port]:
        return list(self._outputs.values())

    def get_input(self, name: str) -> Optional[Port]:
        return self._inputs.get(name)

    def get_output(self, name: str) -> Optional[Port]:
        return self._outputs.get(name)

    @property
    def position(self) -> Position:
        return self._position

    @position.setter
    def position(self, value: Union[Position, Tuple[float, float]]) -> None:
        if not isinstance(value, Position):
            value = Position(float(value[0]), float(value[1]))
        self._position = value

    def translate(self, x: float, y: float) -> None:
        """Move the node so its top-left corner sits at (x, y)."""
        self._position = Position(float(x), float(y))

    @property
    def center(self) -> Tuple[float, float]:
        return (
            self._position.x + self.width / 2,
            self._position.y + self.height / 2,
        )

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) of the node rectangle."""
        x, y = self._position.x, self._position.y
        return x, y, x + self.width, y + self.height

    def __repr__(self) -> str:
        return f"Node({self._id!r}, {self.label!r}, at=({self._position.x}, {self._position.y}))"


@dataclass(frozen=True)
class Connection:
    """Directed link from an output port of one node to an input port of another."""
    id: str
    source: str
    source_output: str
    target: str
    target_input: str


class GraphModel:
    """
    Insertion-ordered set of nodes and connections.

    Node and connection ids come from per-graph counters and are never
    reused, even after removal. Every connection references nodes that are
    present in the graph: removing a node removes its connections first.
    """

    def __init__(
        self,
        default_width: float = Node.DEFAULT_WIDTH,
        default_height: float = Node.DEFAULT_HEIGHT,
    ):
        self._default_width = default_width
        self._default_height = default_height
        self._nodes: Dict[str, Node] = {}
        self._connections: Dict[str, Connection] = {}
        self._node_ids = itertools.count(1)
        self._connection_ids = itertools.count(1)

        # Callbacks
        self._node_added_callbacks: List[Callable[[Node], None]] = []
        self._node_removed_callbacks: List[Callable[[Node], None]] = []
        self._connection_added_callbacks: List[Callable[[Connection], None]] = []
        self._connection_removed_callbacks: List[Callable[[Connection], None]] = []

    @property
    def nodes(self) -> List[Node]:
        """Nodes in insertion order."""
        return list(self._nodes.values())

    @property
    def connections(self) -> List[Connection]:
        """Connections in insertion order."""
        return list(self._connections.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: Union[Node, str]) -> bool:
        node_id = node.id if isinstance(node, Node) else node
        return node_id in self._nodes

    def on_node_added(self, callback: Callable[[Node], None]) -> None:
        """Register callback for node creation."""
        self._node_added_callbacks.append(callback)

    def on_node_removed(self, callback: Callable[[Node], None]) -> None:
        """Register callback for node removal."""
        self._node_removed_callbacks.append(callback)

    def on_connection_added(self, callback: Callable[[Connection], None]) -> None:
        """Register callback for connection creation."""
        self._connection_added_callbacks.append(callback)

    def on_connection_removed(self, callback: Callable[[Connection], None]) -> None:
        """Register callback for connection removal."""
        self._connection_removed_callbacks.append(callback)

    def _notify(self, callbacks: List[Callable], item) -> None:
        for callback in callbacks:
            try:
                callback(item)
            except Exception as e:
                logger.error(f"Graph callback error: {e}")

    def add_node(
        self,
        label: str,
        width: Optional[float] = None,
        height: Optional[float] = None,
        socket: Socket = UNIVERSAL_SOCKET,
        position: Optional[Tuple[float, float]] = None,
    ) -> Node:
        """
        Create a node with one input and one output port on ``socket``.

        ``position`` is the initial top-left corner, set before the
        node-added callbacks run.
        """
        node = Node(
            f"node_{next(self._node_ids)}",
            str(label),
            width=self._default_width if width is None else width,
            height=self._default_height if height is None else height,
            socket=socket,
        )
        if position is not None:
            node.position = position
        self._nodes[node.id] = node
        logger.debug(f"Added node: {node.id} ({node.label!r})")
        self._notify(self._node_added_callbacks, node)
        return node

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_connection(self, connection_id: str) -> Optional[Connection]:
        return self._connections.get(connection_id)

    def _resolve(self, node: Union[Node, str], role: str) -> Node:
        node_id = node.id if isinstance(node, Node) else node
        found = self._nodes.get(node_id)
        # A node object from another graph may share an id with one of ours
        if found is None or (isinstance(node, Node) and found is not node):
            raise DanglingReference(
                f"{role} node {node_id} is not part of this graph", node_id=node_id
            )
        return found

    def add_connection(
        self,
        source: Union[Node, str],
        source_output: str,
        target: Union[Node, str],
        target_input: str,
    ) -> Connection:
        """
        Connect an output port of ``source`` to an input port of ``target``.

        Raises:
            DanglingReference: If either node is not in this graph
            InvalidEndpoint: If a port is missing or the sockets differ
        """
        source_node = self._resolve(source, "Source")
        target_node = self._resolve(target, "Target")

        output = source_node.get_output(source_output)
        if output is None:
            raise InvalidEndpoint(
                f"Node {source_node.id} has no output port {source_output!r}",
                node_id=source_node.id, port=source_output,
            )
        input_port = target_node.get_input(target_input)
        if input_port is None:
            raise InvalidEndpoint(
                f"Node {target_node.id} has no input port {target_input!r}",
                node_id=target_node.id, port=target_input,
            )
        if not output.socket.is_compatible(input_port.socket):
            raise InvalidEndpoint(
                f"Socket {output.socket.name!r} cannot connect to {input_port.socket.name!r}",
                node_id=target_node.id, port=target_input,
            )

        connection = Connection(
            id=f"conn_{next(self._connection_ids)}",
            source=source_node.id,
            source_output=source_output,
            target=target_node.id,
            target_input=target_input,
        )
        self._connections[connection.id] = connection
        logger.debug(
            f"Added connection: {connection.id} "
            f"{source_node.id}:{source_output} -> {target_node.id}:{target_input}"
        )
        self._notify(self._connection_added_callbacks, connection)
        return connection

    def remove_connection(self, connection_id: str) -> Connection:
        """
        Remove a connection.

        Raises:
            InvalidEndpoint: If the connection does not exist
        """
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            raise InvalidEndpoint(f"Connection {connection_id} not found")
        logger.debug(f"Removed connection: {connection_id}")
        self._notify(self._connection_removed_callbacks, connection)
        return connection

    def remove_node(self, node_id: str) -> Node:
        """
        Remove a node together with every connection touching it.

        Raises:
            DanglingReference: If the node does not exist
        """
        node = self._resolve(node_id, "Removed")
        attached = [
            cid for cid, conn in self._connections.items()
            if conn.source == node_id or conn.target == node_id
        ]
        for cid in attached:
            self.remove_connection(cid)

        del self._nodes[node_id]
        logger.debug(f"Removed node: {node_id}")
        self._notify(self._node_removed_callbacks, node)
        return node

    def clear(self) -> None:
        """Remove all nodes and connections. Id counters keep running."""
        for node_id in list(self._nodes.keys()):
            self.remove_node(node_id)

    def outgoing(self, node_id: str) -> List[Connection]:
        return [c for c in self._connections.values() if c.source == node_id]

    def incoming(self, node_id: str) -> List[Connection]:
        return [c for c in self._connections.values() if c.target == node_id]

    def children(self, node_id: str) -> List[Node]:
        """Targets of the node's outgoing connections, in connection order."""
        return [self._nodes[c.target] for c in self.outgoing(node_id)]

    def parents(self, node_id: str) -> List[Node]:
        return [self._nodes[c.source] for c in self.incoming(node_id)]

    def roots(self) -> List[Node]:
        """Nodes without incoming connections, in insertion order."""
        targets = {c.target for c in self._connections.values()}
        return [node for node_id, node in self._nodes.items() if node_id not in targets]

    def adjacency(self) -> Dict[str, List[str]]:
        """node_id -> child node ids, built in a single pass."""
        children: Dict[str, List[str]] = {node_id: [] for node_id in self._nodes}
        for connection in self._connections.values():
            children[connection.source].append(connection.target)
        return children
