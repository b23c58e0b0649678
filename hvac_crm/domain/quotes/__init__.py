"""
Quotes subdomain.

Commercial offers for HVAC work: entities, totals calculation and analytics.
"""
