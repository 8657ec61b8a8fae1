"""
Domain Exceptions - ROI Service Error Kinds
Raised by the validation boundary, storage lookups and report pipeline.

Only ValidationError and NotFoundError reach HTTP callers as client errors.
RenderingUnavailable and DeliveryFailure are recoverable: the report flow
catches them and falls back to returning the textual document / artifact.
"""


class RoiServiceError(Exception):
    """Base class for all ROI service errors."""
    pass


class ValidationError(RoiServiceError):
    """Raised when a scenario payload is malformed or out of range."""
    pass


class NotFoundError(RoiServiceError):
    """Raised when a scenario id does not exist in the store."""

    def __init__(self, scenario_id: str):
        self.scenario_id = scenario_id
        super().__init__(f"Scenario '{scenario_id}' not found")


class RenderingUnavailable(RoiServiceError):
    """Raised when the binary (PDF) renderer is absent, failed or timed out."""
    pass


class DeliveryFailure(RoiServiceError):
    """Raised by a delivery transport when the outbound send fails."""
    pass
