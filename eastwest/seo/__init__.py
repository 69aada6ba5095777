"""
Search-engine metadata.

Responsibilities:
- Build schema.org JSON-LD for the restaurant, menu items, posts and breadcrumbs.
- Render the page and image sitemaps.
- Derive breadcrumb trails from request paths.
"""
