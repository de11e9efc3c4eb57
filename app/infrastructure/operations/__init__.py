"""Operation result types and status enums.

Standardized verdict types shared by transports, the provider pipeline
and result-style configuration factories.
"""

from infrastructure.operations.classifiers import classify_transport_error
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_transport_error",
]
