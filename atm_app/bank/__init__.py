"""
Account service module.

The remote account service contract, a simulated bank implementing it, and
the proxy that adds request logging, input validation and a balance cache.
"""
