"""Shared Kernel module.

Foundational components shared by the membership bounded context and the
HTTP entry point: observation context for probes and bearer-token
validation. Keep this module small; everything here is a cross-context
contract.
"""
