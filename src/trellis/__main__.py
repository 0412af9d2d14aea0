"""
Trellis Main Entry Point

Builds the diagram of a JSON document and writes the scene payload, or
shows it in the Qt viewer.

Usage:
    python -m trellis data.json                 # Scene JSON to stdout
    python -m trellis data.json -o scene.json   # Scene JSON to a file
    python -m trellis data.json --show          # Open the viewer
    cat data.json | python -m trellis -         # Read from stdin
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

# Configure logging before importing Trellis modules
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr),
    ],
)

logger = logging.getLogger("trellis")

from trellis.core.config import TrellisConfig  # noqa: E402
from trellis.core.errors import TrellisError  # noqa: E402
from trellis.core.session import DiagramSession  # noqa: E402
from trellis.core.types import ArrayPolicy, Orientation  # noqa: E402
from trellis.serialization.scene import SceneSchema  # noqa: E402


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="trellis",
        description="Trellis - node-link diagrams of JSON documents",
    )
    parser.add_argument(
        "document",
        help="JSON document to lay out ('-' reads stdin)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Configuration file (default: ~/.trellis/config.json)",
    )
    parser.add_argument(
        "--orientation",
        choices=["lr", "td"],
        help="Tree direction: left-to-right or top-down",
    )
    parser.add_argument(
        "--array-policy",
        choices=[p.value for p in ArrayPolicy],
        help="Keep array elements as flat leaves or expand structured elements",
    )
    parser.add_argument(
        "--no-arrange",
        action="store_true",
        help="Keep the positions computed during synthesis",
    )
    parser.add_argument("--width", type=float, help="Viewport width for fitting")
    parser.add_argument("--height", type=float, help="Viewport height for fitting")
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write the scene JSON here instead of stdout",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Open the diagram viewer (requires the gui extra)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging level."""
    level = logging.DEBUG if debug else logging.INFO
    logging.getLogger("trellis").setLevel(level)


def build_config(args: argparse.Namespace) -> TrellisConfig:
    """Load the configuration file and apply command-line overrides."""
    config = TrellisConfig.load(args.config)
    if args.orientation:
        config.layout.orientation = Orientation.from_string(args.orientation).value
    if args.array_policy:
        config.layout.array_policy = args.array_policy
    if args.width:
        config.viewport.width = args.width
    if args.height:
        config.viewport.height = args.height
    return config


def read_document(source: str) -> Any:
    """Read a JSON document from a path or stdin."""
    if source == "-":
        return json.load(sys.stdin)
    with open(source, encoding="utf-8") as f:
        return json.load(f)


async def build_scene(document: Any, config: TrellisConfig, arrange: bool = True) -> SceneSchema:
    """Synthesize, optionally arrange, and fit a document."""
    session = DiagramSession(config, yield_control=False)
    await session.load_document(document)
    if arrange:
        session.arrange()
    transform = session.fit()
    return SceneSchema.from_graph(session.graph, transform)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.debug)

    try:
        config = build_config(args)
        document = read_document(args.document)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read {args.document}: {e}")
        return 1

    if args.show:
        try:
            session = DiagramSession(config)
        except (TrellisError, ValueError) as e:
            logger.error(f"Failed to build diagram: {e}")
            return 1

        from trellis.gui.viewer import run_viewer

        return run_viewer(session, document, title=f"Trellis - {args.document}",
                          arrange=not args.no_arrange)

    try:
        scene = asyncio.run(build_scene(document, config, arrange=not args.no_arrange))
    except (TrellisError, ValueError) as e:
        logger.error(f"Failed to build diagram: {e}")
        return 1

    payload = scene.to_json()
    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
        logger.info(f"Scene written to {args.output}")
    else:
        sys.stdout.write(payload + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
