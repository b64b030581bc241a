"""
                Food Truck Orders API

A small order-taking backend for a food-truck point of sale.
Serves the customer ordering page and the kitchen board with a
JSON CRUD API over a single collection of orders.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
