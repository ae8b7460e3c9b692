"""
Core Services
Presentation services for core domain entities
"""

from .asset_search_service import AssetSearchService

__all__ = [
    'AssetSearchService',
]
