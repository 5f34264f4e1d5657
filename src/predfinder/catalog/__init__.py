"""Upstream catalog clients (Gamma API, data API) and JSON normalization."""

from predfinder.catalog.base import CatalogSource, FetchError, TradeSource
from predfinder.catalog.data_api import DataApiClient
from predfinder.catalog.gamma import GammaClient

__all__ = ["CatalogSource", "DataApiClient", "FetchError", "GammaClient", "TradeSource"]
