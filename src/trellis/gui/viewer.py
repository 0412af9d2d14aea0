"""
Diagram Viewer - Window that builds and shows one document.

Synthesis runs on the qasync event loop so nodes appear as they are
created; the arrangement is then animated with a TransitionApplier whose
tick callback re-fits the view every frame.
"""

import asyncio
import logging
from typing import Any

import qasync
from PyQt6.QtWidgets import QApplication, QMainWindow

from trellis.core.appliers import TransitionApplier
from trellis.core.session import DiagramSession
from trellis.gui.node_graph.graph_view import DiagramView

logger = logging.getLogger(__name__)


class ViewerWindow(QMainWindow):
    """Main window holding a DiagramView."""

    def __init__(self, session: DiagramSession, title: str = "Trellis"):
        super().__init__()
        self._session = session
        self._view = DiagramView(session, self)
        self.setCentralWidget(self._view)
        self.setWindowTitle(title)

        viewport = session.config.viewport
        self.resize(int(viewport.width), int(viewport.height))

    @property
    def view(self) -> DiagramView:
        return self._view

    @property
    def session(self) -> DiagramSession:
        return self._session

    async def build(self, document: Any, arrange: bool = True) -> None:
        """Synthesize ``document``, then animate the arrangement and follow it."""
        await self._session.load_document(document)
        self._view.sync_positions()
        self._view.fit()
        if not arrange:
            return

        applier = TransitionApplier.from_config(
            self._session.config.transition,
            on_tick=self._view.follow,
        )
        self._session.arrange(applier)

        handle = self._session.transition
        if handle is not None:
            await handle.wait()
        self._view.follow()


def run_viewer(session: DiagramSession, document: Any, title: str = "Trellis", arrange: bool = True) -> int:
    """
    Show ``document`` in a window until it is closed.

    Returns:
        Exit code
    """
    app = QApplication.instance() or QApplication([])
    app.setApplicationName("Trellis")

    loop = qasync.QEventLoop(app)
    asyncio.set_event_loop(loop)

    window = ViewerWindow(session, title)
    window.show()

    async def run_app() -> bool:
        try:
            await window.build(document, arrange=arrange)
        except Exception as e:
            logger.exception(f"Failed to build diagram: {e}")
            return False
        return True

    with loop:
        if not loop.run_until_complete(run_app()):
            window.close()
            return 1
        # Now run the Qt event loop via qasync
        loop.run_forever()

    return 0
