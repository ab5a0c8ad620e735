"""
Service layer.

``BookService`` is the single authority turning raw requests into store
operations and store results into either a ``BookRead`` or a typed error.
``seed_service`` holds the explicit sample-data initialisation.
"""
