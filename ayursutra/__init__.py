"""
AyurSutra clinic management API.

Practitioner accounts, patient records, therapy scheduling and
transactional email.
"""
__version__ = "1.0.0"
