"""Custom exception hierarchy for kerneleig.

All exceptions inherit from KernelEigError, which carries a message, a
context dictionary and a recoverability flag.

Exception Categories:
- ValidationError: Invalid arguments or tensor shapes
- ConfigurationError: Requested approximation cannot be built as configured
- ComputationError: Numerical computation produced unusable values
- ContractError: A collaborator (kernel, domain) broke its contract
"""

from typing import Optional, Any, Dict

import torch


class KernelEigError(Exception):
    """Base exception for all kerneleig errors.

    Attributes:
        message: Error message
        context: Additional context information
        recoverable: Whether the error is potentially recoverable
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.context = self._validate_context(context or {})
        self.recoverable = recoverable

    def __str__(self) -> str:
        base_msg = self.message
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" (Context: {context_str})"
        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def _validate_context(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """Sanitize the context dictionary.

        Keys are coerced to strings and long string representations are
        truncated so that error messages stay readable.
        """
        if not isinstance(context, dict):
            return {"invalid_context": f"Context must be dict, got {type(context).__name__}"}

        max_value_size = 1000

        validated_context = {}
        for key, value in context.items():
            if not isinstance(key, str):
                key = str(key)

            str_value = str(value)
            if len(str_value) > max_value_size:
                validated_context[key] = str_value[:max_value_size - 3] + "..."
            else:
                validated_context[key] = value

        return validated_context


class ValidationError(KernelEigError):
    """Raised when input validation fails.

    Examples:
        - Negative landmark count
        - Non-positive eigenfunction count
        - Tensor shape mismatch
    """

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        expected: Optional[Any] = None,
        actual: Optional[Any] = None,
        **kwargs
    ):
        context = kwargs.get('context', {})
        if parameter:
            context['parameter'] = parameter
        if expected is not None:
            context['expected'] = expected
        if actual is not None:
            context['actual'] = actual

        super().__init__(message, context, recoverable=True)


class ConfigurationError(KernelEigError):
    """Raised when the requested approximation is not achievable.

    Examples:
        - More eigenfunctions requested than landmarks times kernel dimension
        - No landmarks available for a non-empty request
        - Zero or near-zero eigenvalue at the truncation boundary
        - Unknown eigensolver name
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs
    ):
        context = kwargs.get('context', {})
        if config_key:
            context['config_key'] = config_key
        if config_value is not None:
            context['config_value'] = config_value

        super().__init__(message, context, recoverable=True)


class ComputationError(KernelEigError):
    """Raised when numerical computation fails.

    Examples:
        - NaN or infinity in the Gram matrix or its decomposition
        - Eigensolver backend failure
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        values: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        context = kwargs.get('context', {})
        if operation:
            context['operation'] = operation
        if values:
            context.update(values)

        super().__init__(message, context, recoverable=False)


class ContractError(KernelEigError):
    """Raised when a collaborator violates its contract.

    Examples:
        - Kernel returns a block that is not d x d
        - Domain returns fewer points than it claims to hold
    """

    def __init__(
        self,
        message: str,
        collaborator: Optional[str] = None,
        expected: Optional[Any] = None,
        actual: Optional[Any] = None,
        **kwargs
    ):
        context = kwargs.get('context', {})
        if collaborator:
            context['collaborator'] = collaborator
        if expected is not None:
            context['expected'] = expected
        if actual is not None:
            context['actual'] = actual

        super().__init__(message, context, recoverable=False)


def validate_tensor_values(tensor: torch.Tensor, name: str = "tensor", operation: Optional[str] = None):
    """Raise ComputationError if tensor contains NaN or infinity.

    Args:
        tensor: Tensor to check
        name: Name of the tensor for error messages
        operation: Operation that produced the tensor

    Raises:
        ComputationError: If tensor contains non-finite values
    """
    if torch.isnan(tensor).any():
        raise ComputationError(
            f"{name} contains NaN values",
            operation=operation,
            values={'tensor': name}
        )
    if torch.isinf(tensor).any():
        raise ComputationError(
            f"{name} contains infinity values",
            operation=operation,
            values={'tensor': name}
        )
