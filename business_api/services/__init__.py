"""
Services module for business logic separation.

This module contains service classes that encapsulate business logic,
keeping it separate from API endpoints and database models:

- search_compiler: validates search input and composes the search query
- aggregate_fetcher: loads a business' child collections
- business_service: get/search/create/update/delete of businesses
- child_service: per-child CRUD for locations, hours, services and reviews
"""
