from .index_map import IndexMap, IdentityIndexMap, DefaultIndexMap, INTERCEPT_KEY

__all__ = ["IndexMap", "IdentityIndexMap", "DefaultIndexMap", "INTERCEPT_KEY"]
