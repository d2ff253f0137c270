"""
Server module - HTTP API for recording, replay and AI test generation.
"""

from web_test_recorder.server.app import create_app, run_server

__all__ = ["create_app", "run_server"]
