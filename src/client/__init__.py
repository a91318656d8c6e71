"""
HTTP client layer for the webook service.

Modules:
- http: request wrapper (headers, bearer token, JSON bodies) in sync and async flavours
- config: per-resource-group base address and credentials mode
- posts: content resource bindings
- users: identity resource bindings
- envelope: response envelope and payload models
- errors: client error hierarchy
"""

__all__ = [
    "config",
    "envelope",
    "errors",
    "http",
    "posts",
    "users",
]
