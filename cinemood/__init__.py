"""
Cinemood analytics: recommendation experiments and mood-aware media ranking.
"""

__version__ = "0.1.0"
