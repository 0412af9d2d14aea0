"""
Trellis GUI - PyQt6 viewer for diagram sessions.

Requires the ``gui`` extra (PyQt6 and qasync).
"""
