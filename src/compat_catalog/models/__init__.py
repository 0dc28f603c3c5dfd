from compat_catalog.models.records import CatalogVersionRecord

__all__ = [
    "CatalogVersionRecord",
]
