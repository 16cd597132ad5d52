"""
Command-line client for the Collected Notes API.

A bearer token is read from ~/.collected-notes and each invocation issues a
single request for one subcommand (sites, notes, exports or search), printing
the decoded response.
"""
__all__ = [
    "config",
    "client",
    "cli",
]
