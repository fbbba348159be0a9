"""
Releasarr - Sonarr, Radarr and FreshRSS dashboard widgets
"""

__version__ = "0.1.0"
