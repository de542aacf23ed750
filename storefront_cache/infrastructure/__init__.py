"""
Infrastructure Layer

Cache tiers, remote store transports and monitoring.
"""
