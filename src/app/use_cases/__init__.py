"""
Use Cases

Organized into domain folders:
- auth/: Registration, login, token refresh, password change and reset
- users/: Profile self-service, administration and internal lookups
"""
