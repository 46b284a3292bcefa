"""Classification of call sites by the role of the called function."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

from irscan.config import load_storage_suffixes
from irscan.core.models import Statement, Type
from irscan.core.registry import ProgramRegistry
from irscan.logger import LogLevel

if TYPE_CHECKING:
    from irscan.core.function import Function


class CallCategory(Enum):
    """Bucket a call site is sorted into."""
    STORAGE_READ = "storage_read"
    STORAGE_WRITE = "storage_write"
    EVENT = "event"
    CORE = "core"
    PRIVATE = "private"
    EXTERNAL = "external"
    LIBRARY = "library"


_ROLE_CATEGORIES = {
    Type.EVENT: CallCategory.EVENT,
    Type.CORE: CallCategory.CORE,
    Type.PRIVATE: CallCategory.PRIVATE,
    Type.ABI_CALL_CONTRACT: CallCategory.EXTERNAL,
    Type.ABI_LIBRARY_CALL: CallCategory.LIBRARY,
}


@dataclass
class CallBuckets:
    """Call sites of one function, grouped by category, in source order.

    Only calls made through a named function are recorded; storage accesses,
    events and contract calls done with the raw system operation are not.
    """
    storage_vars_read: List[Statement] = field(default_factory=list)
    storage_vars_written: List[Statement] = field(default_factory=list)
    core_functions_calls: List[Statement] = field(default_factory=list)
    private_functions_calls: List[Statement] = field(default_factory=list)
    events_emitted: List[Statement] = field(default_factory=list)
    external_functions_calls: List[Statement] = field(default_factory=list)
    library_functions_calls: List[Statement] = field(default_factory=list)

    def bucket(self, category: CallCategory) -> List[Statement]:
        return {
            CallCategory.STORAGE_READ: self.storage_vars_read,
            CallCategory.STORAGE_WRITE: self.storage_vars_written,
            CallCategory.CORE: self.core_functions_calls,
            CallCategory.PRIVATE: self.private_functions_calls,
            CallCategory.EVENT: self.events_emitted,
            CallCategory.EXTERNAL: self.external_functions_calls,
            CallCategory.LIBRARY: self.library_functions_calls,
        }[category]


class CallClassifier:
    """Resolves call sites against the program's functions and buckets them."""

    def __init__(self, functions: Sequence["Function"], registry: ProgramRegistry,
                 storage_suffixes: Optional[Tuple[str, str]] = None, logger=None):
        """Initialize the classifier.

        Args:
            functions: Every function of the program, roles already assigned
            registry: Operation registry of the program
            storage_suffixes: ``(read, write)`` suffixes of storage accessor names,
                loaded from the configuration when omitted
            logger: Logger instance
        """
        self.functions = functions
        self.registry = registry
        self.read_suffix, self.write_suffix = storage_suffixes or load_storage_suffixes()
        self.logger = logger

    def resolve_callee(self, statement: Statement) -> Optional["Function"]:
        """Return the first function whose name matches the statement's callee."""
        callee_name = self.registry.resolve_function_call(statement)
        if callee_name is None:
            return None
        # First match wins, duplicated names are not disambiguated
        for function in self.functions:
            if function.name == callee_name:
                return function
        if self.logger:
            self.logger.log(f"Unresolved call to {callee_name}", LogLevel.DEBUG)
        return None

    def categorize(self, statement: Statement) -> Optional[CallCategory]:
        """Category of a single statement, None when it isn't a classified call."""
        callee = self.resolve_callee(statement)
        if callee is None:
            return None
        role = callee.ty
        if role is Type.STORAGE:
            if callee.name.endswith(self.read_suffix):
                return CallCategory.STORAGE_READ
            if callee.name.endswith(self.write_suffix):
                return CallCategory.STORAGE_WRITE
            return None
        return _ROLE_CATEGORIES.get(role)

    def classify(self, statements: Sequence[Statement]) -> CallBuckets:
        """Bucket every classified call site of ``statements``."""
        buckets = CallBuckets()
        for statement in statements:
            category = self.categorize(statement)
            if category is not None:
                buckets.bucket(category).append(statement)
                if self.logger:
                    self.logger.log(f"Classified {statement} as {category.value}", LogLevel.DEBUG)
        return buckets
