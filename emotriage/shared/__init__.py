"""
Shared Kernel Module
====================

Shared infrastructure used by every bounded context (uploads and triage):
structured logging, metrics export and HTTP middleware.

DO NOT add triage rules or upload policy to the shared kernel.
"""
