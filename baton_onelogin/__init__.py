"""Connector that syncs OneLogin users, roles, groups and apps."""

__version__ = "0.1.0"