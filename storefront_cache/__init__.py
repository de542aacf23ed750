"""
Storefront Cache

Two-tier (memory + remote key-value store) cache for a multi-tenant
storefront backend.
"""

__version__ = "1.0.0"
