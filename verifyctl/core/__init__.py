"""Core Business Logic Module

This module provides the resource access layer of the CLI, independent of
argument parsing and output formatting.

Module Structure:
    - verify/        : Verify tenant API client (requests, errors, resources)
    - validators.py  : Required-field checks on resource documents

Usage Pattern:
    from verifyctl.core.verify import APIClientService, VerifyClient
    from verifyctl.core.validators import validate_document
"""
