"""
Triage Interfaces Layer
========================

Interface adapters (controllers) for the triage module.
"""

from emotriage.triage.interfaces.controllers import triage_router

__all__ = ["triage_router"]
