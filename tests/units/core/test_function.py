"""Tests for the Function program model."""

import pytest

from irscan.core.models import ConcreteTypeId, Param, Type
from irscan.utils import PhaseOrderError, RoleAlreadyAssignedError, RoleNotAssignedError


class TestFunctionRole:
    """Role is written once and read many times."""

    def test_role_unassigned_raises(self, ir):
        """Test role unassigned raises."""
        function = ir.function("contract::withdraw", [ir.ret()])
        assert not function.has_role
        with pytest.raises(RoleNotAssignedError):
            function.ty

    def test_role_assigned_once(self, ir):
        """Test role assigned once."""
        function = ir.function("contract::withdraw", [ir.ret()])
        function._set_ty(Type.EXTERNAL)
        assert function.ty is Type.EXTERNAL
        assert function.has_role

        with pytest.raises(RoleAlreadyAssignedError):
            function._set_ty(Type.VIEW)
        assert function.ty is Type.EXTERNAL

    def test_repr_shows_role(self, ir):
        """Test repr shows role."""
        function = ir.function("contract::withdraw", [ir.ret()])
        assert "unassigned" in repr(function)
        function._set_ty(Type.VIEW)
        assert "view" in repr(function)


class TestFunctionSignature:
    """Filtered and unfiltered parameter and return views."""

    def setup_method(self):
        self.gas = ConcreteTypeId(1, "GasBuiltin")
        self.system = ConcreteTypeId(2, "System")
        self.felt = ConcreteTypeId(3, "felt252")
        self.u256 = ConcreteTypeId(4, "core::integer::u256")
        self.params = [Param(0, self.gas), Param(1, self.system), Param(2, self.felt), Param(3, self.u256)]

    def test_params_filter_builtins(self, ir):
        """Test params filter builtins."""
        function = ir.function("contract::deposit", [ir.ret()], params=self.params)

        assert [p.id for p in function.params_all()] == [0, 1, 2, 3]
        assert [p.ty for p in function.params()] == [self.felt, self.u256]

    def test_returns_filter_builtins(self, ir):
        """Test returns filter builtins."""
        function = ir.function("contract::deposit", [ir.ret()], rets=[self.gas, self.u256, self.system])

        assert list(function.returns_all()) == [self.gas, self.u256, self.system]
        assert list(function.returns()) == [self.u256]

    def test_type_without_debug_name_is_kept(self, ir):
        """Test type without debug name is kept."""
        anonymous = ConcreteTypeId(9)
        function = ir.function("contract::deposit", [ir.ret()], rets=[anonymous])
        assert list(function.returns()) == [anonymous]
        assert str(anonymous) == "[9]"


class TestFunctionStatements:
    """Statement list access."""

    def test_statements_and_suffix_views(self, ir):
        """Test statements and suffix views."""
        statements = [ir.op(), ir.call("contract::helper"), ir.ret()]
        function = ir.function("contract::withdraw", statements)

        assert list(function.get_statements()) == statements
        assert list(function.get_statements_at(1)) == statements[1:]
        assert list(function.get_statements_at(3)) == []

    def test_nothing_computed_before_analyze(self, ir):
        """Test nothing computed before analyze."""
        function = ir.function("contract::withdraw", [ir.ret()])

        assert function.get_cfg() is None
        assert list(function.storage_vars_read()) == []
        assert list(function.external_functions_calls()) == []
        assert function.analyses().reentrancy == {}
        assert not function.is_reentrant()

    def test_run_analyses_before_analyze(self, ir):
        """Test run analyses before analyze."""
        function = ir.function("contract::withdraw", [ir.ret()])
        function._set_ty(Type.EXTERNAL)
        with pytest.raises(PhaseOrderError):
            function.run_analyses([function], ir.registry)

    def test_run_analyses_ignores_unanalyzed_private(self, ir):
        """Test run analyses ignores unanalyzed private."""
        function = ir.function("contract::helper", [ir.ret()])
        function._set_ty(Type.PRIVATE)
        function.run_analyses([function], ir.registry)
        assert function.analyses().reentrancy == {}

    def test_analyze_builds_cfg_once(self, ir):
        """Test analyze builds cfg once."""
        function = ir.function("contract::withdraw", [ir.op(), ir.ret()])
        program = ir.program([function], {"contract::withdraw": Type.EXTERNAL})
        program.analyze()
        cfg = function.get_cfg()

        function.analyze(program.functions, program.registry)
        assert function.get_cfg() is cfg
