"""Custom exceptions for settings management."""


class SettingsError(Exception):
    """Raised when settings data cannot be validated or persisted."""
