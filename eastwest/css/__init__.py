"""
Critical/deferred CSS delivery.

Responsibilities:
- Load the inline critical and non-critical stylesheets.
- Drive the deferred stylesheet bootstrap and render its browser script.
- Compile ``globals-deferred.css`` into the served asset.
"""
