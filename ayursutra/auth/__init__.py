"""
Authentication module for the clinic system.

This module provides:
- Practitioner registration and login
- JWT bearer token issuance and verification
- Profile lookup for the authenticated practitioner
- Password reset request and completion
"""
