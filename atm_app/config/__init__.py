"""
Configuration module.

Default parameters, YAML site overrides and validation for the ATM core.
"""
