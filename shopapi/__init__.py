# shopapi/__init__.py
"""E-commerce catalog and ordering REST API"""

__version__ = "0.1.0"
