"""
Sophos Central endpoint dashboard.

This package provides:
- Secure-file storage of Sophos API credentials
- Sophos Central API client (OAuth2 token + paginated endpoint inventory)
- Normalization of vendor endpoint records
- Dashboard statistics and filtering, with a sample-data fallback
"""
