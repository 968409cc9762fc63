from fastapi import HTTPException, status


class ApiError(HTTPException):
    """Base for errors that end a request with a short `{"error": ...}` body."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(status_code=type(self).status_code, detail=message or self.default_message)


class MissingFile(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Upload a PDF file under field 'pdf'"


class MissingWatermarkContent(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Provide either watermark text or image"


class UnsupportedImageFormat(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Watermark image must be a PNG or JPEG file"


class InvalidColor(ApiError):
    default_message = "Invalid hex color"


class InvalidDate(ApiError):
    default_message = "Invalid date"


class UpstreamFetchFailure(ApiError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Failed to fetch watermark image"
