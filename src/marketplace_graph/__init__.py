"""
Marketplace graph service.

Records shopper interactions and artisan follows in a FalkorDB graph and
serves "people who interacted with what you interacted with also interacted
with" recommendations, hydrated against the MongoDB product catalog.
"""

__version__ = "0.1.0"
