class SettingsError(Exception):
    """Base class for every error raised by the settings store."""

    code = 0

    def __init__(self, message: str, *args):
        super().__init__(message, *args)
        self.message = message

    def __str__(self):
        return self.message


class InvalidCacheComponent(SettingsError):
    code = 1


class InvalidCacheId(SettingsError):
    code = 2


class InvalidName(SettingsError):
    """A setting or category identifier does not match the label grammar."""

    code = 3

    def __init__(self, identifier, message: str | None = None):
        super().__init__(
            message
            or f"Invalid setting identifier {identifier!r}. Identifiers must be "
            "valid labels for both the category and the name, joined with a "
            "full stop. The category is optional."
        )
        self.identifier = identifier


class NonExistentCategory(SettingsError):
    """A category source exists but does not hold a mapping of settings."""

    code = 6

    def __init__(self, category: str):
        super().__init__(f'The category "{category}" does not exist.')
        self.category = category


class ReadOnly(SettingsError):
    code = 7

    def __init__(self, identifier: str, action: str = "modify"):
        super().__init__(
            f'Unable to {action} setting "{identifier}". '
            "File-based settings are read-only."
        )
        self.identifier = identifier


class InvalidDbComponent(SettingsError):
    code = 8


class InvalidDbTable(SettingsError):
    code = 9
