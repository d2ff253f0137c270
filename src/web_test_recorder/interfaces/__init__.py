"""
Interfaces module - Contracts for the external collaborators.
"""

from web_test_recorder.interfaces.browser import IAutomationPage, IBrowserProvider
from web_test_recorder.interfaces.recording import RecordingBackend, RecordingHandle

__all__ = [
    "IAutomationPage",
    "IBrowserProvider",
    "RecordingBackend",
    "RecordingHandle",
]
