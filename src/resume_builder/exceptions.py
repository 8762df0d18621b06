"""Error taxonomy for resume generation, archiving and rendering.

Every error carries a stable ``kind`` string so boundary layers (HTTP, CLI)
can report a distinguishable failure without inspecting class names.
"""

from __future__ import annotations


class ResumeBuilderError(Exception):
    """Base class for all service errors."""

    kind: str = "ResumeBuilderError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class Unauthenticated(ResumeBuilderError):
    kind = "Unauthenticated"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class EmptyJobDescription(ResumeBuilderError):
    kind = "EmptyJobDescription"

    def __init__(self, message: str = "Job description must not be empty"):
        super().__init__(message)


class MisconfiguredService(ResumeBuilderError):
    """Raised at startup when the provider credentials are missing."""

    kind = "MisconfiguredService"


class ProviderError(ResumeBuilderError):
    """Non-2xx response from the text-generation provider.

    Attributes:
        message: The provider's own error message where available.
        status_code: HTTP status returned by the provider, if known.
    """

    kind = "ProviderError"

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.status_code is not None:
            data["provider_status"] = self.status_code
        return data


class EmptyCompletion(ResumeBuilderError):
    kind = "EmptyCompletion"

    def __init__(self, message: str = "Provider returned no completion content"):
        super().__init__(message)


class ArchiveWriteError(ResumeBuilderError):
    kind = "ArchiveWriteError"


class ResumeSaveError(ResumeBuilderError):
    """Generation succeeded but the result could not be archived.

    The generated text is kept on the error so the caller can still show or
    download it.
    """

    kind = "ResumeSaveError"

    def __init__(self, message: str, resume: str):
        self.resume = resume
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["resume"] = self.resume
        return data


class ResumeNotFound(ResumeBuilderError):
    kind = "ResumeNotFound"


class UnknownTemplate(ResumeBuilderError):
    kind = "UnknownTemplate"

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Unknown template: {template_id}")


class InvalidRequest(ResumeBuilderError):
    """Request body or query failed validation at the HTTP boundary."""

    kind = "InvalidRequest"


class ProfileStoreError(ResumeBuilderError):
    kind = "ProfileStoreError"
