class ConfigurationError(Exception):
    """Raised at startup when a required security setting is missing or unusable"""


class DuplicateUserError(Exception):
    """A username or email unique constraint was violated on write"""
