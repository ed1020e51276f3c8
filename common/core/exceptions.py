class AppException(Exception):
    """Base application exception."""

    pass


class NotFoundError(AppException):
    """Resource not found exception."""

    pass


class ValidationError(AppException):
    """Validation error exception."""

    pass


class StorageError(AppException):
    """Storage operation error exception."""

    pass


class ProcessingError(AppException):
    """Processing error exception."""

    pass


class InvalidInputError(ValidationError):
    """Missing, empty or wrongly typed argument, or top_k out of range."""

    pass


class EmptyAfterPreprocessingError(ProcessingError):
    """Text reduced to nothing after whitespace normalisation."""

    pass


class ChunkingFailedError(ProcessingError):
    """Chunker produced zero chunks."""

    pass


class DimensionMismatchError(ProcessingError):
    """Two vectors of different length were compared."""

    def __init__(self, left: int, right: int):
        self.left = left
        self.right = right
        super().__init__(f"Vectors must have the same length ({left} != {right})")


class NoRelevantContextError(ProcessingError):
    """Ranking selected no chunks."""

    pass


class EmptyContextError(ProcessingError):
    """Selected chunks joined into a blank context."""

    pass


class StorageUnavailableError(StorageError):
    """Document store could not be reached or refused a write."""

    pass


class DocumentNotFoundError(NotFoundError):
    """No metadata or chunks exist for a (document_id, session_id) pair."""

    def __init__(self, document_id: str, session_id: str):
        self.document_id = document_id
        self.session_id = session_id
        super().__init__(
            f"Document {document_id} not found or not processed for session {session_id}"
        )
