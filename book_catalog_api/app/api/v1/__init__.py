"""
Version 1 of the API.

Breaking changes should be introduced in new version subpackages to
preserve backwards compatibility.
"""
