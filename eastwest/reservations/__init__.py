"""
Table reservations.

Responsibilities:
- Validate reservation requests submitted from the site.
- Keep submitted reservations in memory for the staff views.
- Format the notification sent to the reservations inbox.
"""
