"""
CLI module for skillaudit.

Provides the command-line interface using Click.
"""

from skillaudit.cli.main import audit_command, audit_main, cli, harness_command, harness_main, main

__all__ = ["audit_command", "audit_main", "cli", "harness_command", "harness_main", "main"]
