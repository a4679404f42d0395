"""Plugins shipped with the service and registered at startup."""
