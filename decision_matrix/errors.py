from typing import List, Optional


class DecisionMatrixError(Exception):
    """Base class for everything this package raises on purpose."""


class ValidationError(DecisionMatrixError, ValueError):
    code = "Validation"
    default_message = "Decision is not valid."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingNameError(ValidationError):
    code = "MissingName"
    default_message = "Please name your decision first"


class NoCriteriaError(ValidationError):
    code = "NoCriteria"
    default_message = "Add at least one criterion before calculating"


class InvalidWeightError(ValidationError):
    code = "InvalidWeight"
    default_message = "All criteria percentage must be greater than 0"

    def __init__(self, criteria_names: Optional[List[str]] = None, message: Optional[str] = None):
        self.criteria_names = list(criteria_names or [])
        if message is None and self.criteria_names:
            message = f"{self.default_message} (check: {', '.join(self.criteria_names)})"
        super().__init__(message)


class InvalidRangeError(ValidationError):
    code = "InvalidRange"
    default_message = "Range minimum must be lower than maximum"

    def __init__(self, criteria_names: Optional[List[str]] = None, message: Optional[str] = None):
        self.criteria_names = list(criteria_names or [])
        if message is None and self.criteria_names:
            message = f"{self.default_message} (check: {', '.join(self.criteria_names)})"
        super().__init__(message)


class IncompleteOptionError(ValidationError):
    code = "IncompleteOption"
    default_message = "All criteria and options must have names"


class MissingScoresError(ValidationError):
    code = "MissingScores"
    default_message = "Please complete the analysis first"


class LastCriterionError(ValidationError):
    code = "LastCriterion"
    default_message = "You must have at least one criterion"


class LastOptionError(ValidationError):
    code = "LastOption"
    default_message = "You must have at least one option"


class DuplicateCriterionError(ValidationError):
    code = "DuplicateCriterion"
    default_message = "Criterion names must be unique"

    def __init__(self, name: str = "", message: Optional[str] = None):
        self.name = name
        if message is None and name:
            message = f"{self.default_message} (\"{name}\" is already used)"
        super().__init__(message)


class StorageError(DecisionMatrixError):
    """A create/list/delete call on the document store failed."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        msg = f"Storage {operation} failed"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
