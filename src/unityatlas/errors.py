"""Exceptions raised by the Unity project analyzer."""


class AnalyzerError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ConfigurationError(AnalyzerError):
    """Raised when a required analyzer input is missing or invalid."""
