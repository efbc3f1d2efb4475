class PortalServiceError(Exception):
    """Base class for failures raised by the service layer."""


class AssessmentError(PortalServiceError):
    """The model call failed or its reply did not match the assessment schema."""


class ReportRenderError(PortalServiceError):
    """HTML could not be rasterized into a PDF report."""
