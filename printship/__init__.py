"""
PrintShip Shipping Engine

Multi-courier, multi-store shipping quote aggregation for the print shop.
"""
__version__ = "1.0.0"
