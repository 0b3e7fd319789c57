"""Helper utilities for Humidity Switch Control.

Only configuration validation lives here for now; it is shared by the
config flow, the services and the persisted trigger fields.
"""
