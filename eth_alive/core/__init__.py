"""
Core module - Entities, ports and errors.

This layer has no dependencies on frameworks or transports.
"""
