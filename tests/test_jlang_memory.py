"""
Unit tests for memory budget bookkeeping.
"""

from jlang import MemoryBudget, Environment, value_size


class TestValueSize:
    """Test the bytes charged per value."""

    def test_ascii(self):
        assert value_size("hello") == 21

    def test_empty(self):
        """An empty value still costs the fixed overhead."""
        assert value_size("") == 16

    def test_multibyte(self):
        """Length is measured in encoded bytes, not characters."""
        assert value_size("café") == 21

    def test_custom_overhead(self):
        assert value_size("abc", overhead=0) == 3


class TestMemoryBudget:
    """Test ceiling checks."""

    def test_allocate_within(self):
        budget = MemoryBudget(100)
        assert budget.allocate(40)
        assert budget.used == 40
        assert budget.available == 60

    def test_exact_ceiling_accepted(self):
        budget = MemoryBudget(21)
        assert budget.allocate(21)
        assert not budget.allocate(1)
        assert budget.used == 21

    def test_rejection_leaves_usage(self):
        """A rejected allocation charges nothing."""
        budget = MemoryBudget(10)
        assert not budget.allocate(21)
        assert budget.used == 0

    def test_deallocate(self):
        budget = MemoryBudget(50)
        budget.allocate(30)
        budget.deallocate(30)
        assert budget.used == 0
        assert budget.allocate(50)

    def test_deallocate_unguarded(self):
        """Releasing more than was charged drives usage negative."""
        budget = MemoryBudget(10)
        budget.deallocate(5)
        assert budget.used == -5

    def test_repr(self):
        assert repr(MemoryBudget(8)) == "MemoryBudget(ceiling=8, used=0)"


class TestEnvironmentBudget:
    """Test the environment's budget wrapper."""

    def test_no_budget_accepts_everything(self):
        env = Environment()
        assert not env.has_budget
        assert env.allocate(10 ** 9)

    def test_set_budget_resets_usage(self):
        env = Environment()
        env.set_budget(100)
        env.allocate(60)
        env.set_budget(100)
        assert env.budget.used == 0

    def test_remove_variable_returns_size(self):
        env = Environment()
        env.set_variable("x", "hello", 21)
        assert env.remove_variable("x") == 21
        assert not env.has_variable("x")
        assert env.remove_variable("x") is None

    def test_clear(self):
        env = Environment()
        env.set_budget(10)
        env.set_variable("x", "y", 17)
        env.clear()
        assert env.variables == {}
        assert env.budget is None
