"""
Trellis Serialization - Renderer payloads for laid-out diagrams.
"""

from trellis.serialization.scene import (
    SCENE_VERSION,
    ConnectionSchema,
    NodeSchema,
    PortSchema,
    SceneSchema,
)

__all__ = [
    "SCENE_VERSION",
    "ConnectionSchema",
    "NodeSchema",
    "PortSchema",
    "SceneSchema",
]
