"""
Truck Harvester API package.
"""
