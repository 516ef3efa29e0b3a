"""
Use cases built on top of the Storage contract.

Today this holds the seed routine that populates reference data on startup.
"""
