"""Exceptions shared across the analysis core."""


__all__ = [
    "IRScanError",
    "InvariantViolation",
    "RoleNotAssignedError",
    "RoleAlreadyAssignedError",
    "RoleAssignmentError",
    "InvalidBranchTargetError",
    "PhaseOrderError",
]


class IRScanError(Exception):
    def __init__(self, message, logger=None):
        super().__init__(message)
        self.message = message
        if logger:
            logger.log_error(message)

    def dict(self) -> dict[str, str]:
        return {"type": self.__class__.__name__, "message": str(self.message)}


class InvariantViolation(IRScanError):
    """A whole-program invariant was broken by the caller. Never recovered."""


class RoleNotAssignedError(InvariantViolation):
    pass


class RoleAlreadyAssignedError(InvariantViolation):
    pass


class RoleAssignmentError(InvariantViolation):
    pass


class InvalidBranchTargetError(InvariantViolation):
    def __init__(self, function_name: str, statement_idx: int, target: int, logger=None):
        super().__init__(
            f"Branch target {target} at statement {statement_idx} is outside of function {function_name}",
            logger,
        )
        self.function_name = function_name
        self.statement_idx = statement_idx
        self.target = target


class PhaseOrderError(InvariantViolation):
    pass
