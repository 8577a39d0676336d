"""Custom Exceptions for the LyricSync application."""

class LyricSyncError(Exception):
    """Base class for exceptions in this module."""
    pass

class ConfigurationError(LyricSyncError):
    """Exception raised for errors in configuration loading or missing credentials."""
    pass

class AudioExtractionError(LyricSyncError):
    """Exception raised for errors while preparing the audio payload."""
    pass

class TranscriptionError(LyricSyncError):
    """Exception raised for errors during transcription."""
    pass

class EmptyResponseError(TranscriptionError):
    """Exception raised when the remote model answers with no usable text."""
    pass

class MalformedResponseError(TranscriptionError):
    """Exception raised when the model output cannot be recovered as JSON segments."""
    pass

class FormattingError(LyricSyncError):
    """Exception raised for errors during subtitle formatting."""
    pass

class FileSystemError(LyricSyncError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    pass
