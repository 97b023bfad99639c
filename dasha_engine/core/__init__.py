"""
Core of the dasha engine: period models, subdivision arithmetic, error
taxonomy and the contract of the external calculation service.

Nothing here performs I/O apart from reading packaged JSON schemas.
"""
