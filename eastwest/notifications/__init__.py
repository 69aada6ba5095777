"""
Outbound notifications.

Responsibilities:
- Send transactional email through Resend, falling back to SMTP.
"""
