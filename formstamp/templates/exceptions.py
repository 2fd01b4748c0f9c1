# formstamp/templates/exceptions.py

"""
Custom exceptions for template mapping and batch generation.

NotFound, Validation and TemplateFileMissing are raised before any response
bytes are produced and are reported to the caller. RenderFailure is recovered
inside a batch. StreamFailure happens after streaming began and can only
abort the transfer.
"""

from typing import Optional


class FormstampBaseException(Exception):
    """Base exception for all template and generation errors."""
    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotFoundException(FormstampBaseException):
    """Raised when a referenced row does not exist."""


class TemplateNotFoundException(NotFoundException):
    """Raised when a template id has no row."""
    def __init__(self, template_id: int):
        self.template_id = template_id
        super().__init__("template not found", {"template_id": template_id})


class CompanyNotFoundException(NotFoundException):
    """Raised when a company id has no row."""
    def __init__(self, company_id: int):
        self.company_id = company_id
        super().__init__("company not found", {"company_id": company_id})


class ValidationException(FormstampBaseException):
    """Raised when a request body has the wrong shape."""


class TemplateFileMissingException(FormstampBaseException):
    """
    Raised when the template row exists but its stored bytes are gone.
    Re-uploading the template is the remedy, retrying is not.
    """
    def __init__(self, stored_path: str, template_id: Optional[int] = None):
        self.stored_path = stored_path
        self.template_id = template_id
        super().__init__(
            "template file missing on server; please re-upload",
            {"template_id": template_id, "stored_path": stored_path},
        )


class RenderFailureException(FormstampBaseException):
    """Raised when one company's document could not be rendered."""
    def __init__(self, company_id: int, reason: str):
        self.company_id = company_id
        super().__init__(
            f"Rendering failed for company {company_id}: {reason}",
            {"company_id": company_id},
        )


class StreamFailureException(FormstampBaseException):
    """Raised when the archive stream breaks after bytes were sent."""
