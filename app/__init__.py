"""Fleetflow: multi-tenant fleet expense backend (authorization core)."""
