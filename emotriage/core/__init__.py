"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from emotriage.core.exceptions import (
    ApplicationException,
    ValidationException,
    InvalidContentTypeException,
    UnauthorizedException,
    ObjectNotFoundException,
    ConfigurationException,
    ExternalServiceException,
    ClassifierException,
    PresignException,
)

__all__ = [
    "ApplicationException",
    "ValidationException",
    "InvalidContentTypeException",
    "UnauthorizedException",
    "ObjectNotFoundException",
    "ConfigurationException",
    "ExternalServiceException",
    "ClassifierException",
    "PresignException",
]
