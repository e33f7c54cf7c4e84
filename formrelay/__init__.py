"""formrelay: normalization and response layer for form submissions."""

__version__ = "0.1.0"

# Imports must come after __version__; the CLI reads it back from here.
from formrelay.core.models import DELIMITER, FieldEnvelope, RoutedParams
from formrelay.input.request import RawRequest
from formrelay.reference import FormDataReference, FormDataReferenceBuilder
from formrelay.responses import ApiResponse, ApiResponseBuilder

__all__ = [
    "__version__",
    "DELIMITER",
    "ApiResponse",
    "ApiResponseBuilder",
    "FieldEnvelope",
    "FormDataReference",
    "FormDataReferenceBuilder",
    "RawRequest",
    "RoutedParams",
]
