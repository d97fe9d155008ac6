"""API v1 routers."""

from shopcatalog.api.v1 import products, shops

__all__ = ["products", "shops"]
