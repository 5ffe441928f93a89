# caselens/services/errors.py
"""Domain errors raised by the services and rendered by the API as ``{"error": message}``."""


class CaseLensError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# -- 404 ---------------------------------------------------------------

class NotFoundError(CaseLensError):
    status_code = 404


class CaseNotFoundError(NotFoundError):
    def __init__(self, case_id: str):
        super().__init__("Case not found")
        self.case_id = case_id


class AnalysisNotFoundError(NotFoundError):
    def __init__(self, case_id: str):
        super().__init__("No AI analysis available for this case")
        self.case_id = case_id


class ImageNotFoundError(NotFoundError):
    def __init__(self, image_id: str):
        super().__init__("Image not found")
        self.image_id = image_id


# -- 400 ---------------------------------------------------------------

class CaseValidationError(CaseLensError):
    status_code = 400


class NoImagesError(CaseValidationError):
    def __init__(self):
        super().__init__("No images found to analyze. Please upload images first.")


class EmptyQuestionError(CaseValidationError):
    def __init__(self):
        super().__init__("Question is required")


class InvalidImageError(CaseValidationError):
    pass


# -- 5xx ---------------------------------------------------------------

class UpstreamServiceError(CaseLensError):
    """An AI or geocoding call failed or returned unusable data."""


class AnalysisServiceError(UpstreamServiceError):
    def __init__(self, detail: str):
        super().__init__(f"Failed to analyze case: {detail}")


class ChatServiceError(UpstreamServiceError):
    def __init__(self, detail: str):
        super().__init__(f"Failed to process question: {detail}")


class StorageError(CaseLensError):
    """The image host rejected an upload or delete."""
