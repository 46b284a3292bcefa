"""Operation registry used to resolve what an invocation does."""

from typing import Dict, Iterable, Optional

from irscan.core.models import ConcreteLibfunc, Invocation, LibfuncKind, Statement


class ProgramRegistry:
    """Maps libfunc identifiers of a loaded program to their concrete description."""

    def __init__(self, libfuncs: Iterable[ConcreteLibfunc] = ()):
        self._libfuncs: Dict[str, ConcreteLibfunc] = {}
        for libfunc in libfuncs:
            self.register(libfunc)

    def register(self, libfunc: ConcreteLibfunc) -> None:
        self._libfuncs[libfunc.id] = libfunc

    def get_libfunc(self, libfunc_id: str) -> Optional[ConcreteLibfunc]:
        return self._libfuncs.get(libfunc_id)

    def __contains__(self, libfunc_id: str) -> bool:
        return libfunc_id in self._libfuncs

    def __len__(self) -> int:
        return len(self._libfuncs)

    def resolve_function_call(self, statement: Statement) -> Optional[str]:
        """Return the callee name if the statement calls a program function.
        
        Unknown operations and anything other than a function call yield None.
        """
        if not isinstance(statement, Invocation):
            return None
        libfunc = self._libfuncs.get(statement.libfunc_id)
        if libfunc is None or libfunc.kind is not LibfuncKind.FUNCTION_CALL:
            return None
        return libfunc.function_id
