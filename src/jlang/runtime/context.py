"""
Execution state for the JLang interpreter.

There is no lexical scoping: one Environment holds every variable and
function for the lifetime of an interpreter, and function calls only
rebind the argument list carried by their CallFrame.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .memory import MemoryBudget
from ..parser import FunctionDef


@dataclass
class Environment:
    """
    Global variable table, function table and memory budget.

    Tracks:
    - Variables (name -> string value)
    - Bytes charged for each variable's current value
    - Functions (name -> definition), last definition wins
    - The memory budget, once MAX_MEM has been seen
    """
    variables: Dict[str, str] = field(default_factory=dict)
    sizes: Dict[str, int] = field(default_factory=dict)
    functions: Dict[str, FunctionDef] = field(default_factory=dict)
    budget: Optional[MemoryBudget] = None

    def get_variable(self, name: str) -> Optional[str]:
        """Look up a variable; None if undefined."""
        return self.variables.get(name)

    def set_variable(self, name: str, value: str, size: int = 0) -> None:
        """Define or overwrite a variable."""
        self.variables[name] = value
        self.sizes[name] = size

    def remove_variable(self, name: str) -> Optional[int]:
        """Remove a variable; returns the bytes it was charged, None if undefined."""
        if name not in self.variables:
            return None
        del self.variables[name]
        return self.sizes.pop(name, 0)

    def has_variable(self, name: str) -> bool:
        return name in self.variables

    def get_function(self, name: str) -> Optional[FunctionDef]:
        return self.functions.get(name)

    def set_budget(self, ceiling: int) -> MemoryBudget:
        """Replace the memory budget with a fresh one (usage reset to 0)."""
        self.budget = MemoryBudget(ceiling)
        return self.budget

    @property
    def has_budget(self) -> bool:
        return self.budget is not None

    def allocate(self, size: int) -> bool:
        """Charge size bytes; always accepted when no budget is configured."""
        if self.budget is None:
            return True
        return self.budget.allocate(size)

    def deallocate(self, size: int) -> None:
        if self.budget is not None:
            self.budget.deallocate(size)

    def clear(self) -> None:
        """Forget all variables, functions and the budget."""
        self.variables.clear()
        self.sizes.clear()
        self.functions.clear()
        self.budget = None


@dataclass(frozen=True)
class CallFrame:
    """Per-call context: the bound arguments and the script directory."""
    arguments: List[str] = field(default_factory=list)
    base_directory: Path = field(default_factory=Path.cwd)
    depth: int = 0
    function_name: Optional[str] = None

    @property
    def first_argument(self) -> Optional[str]:
        return self.arguments[0] if self.arguments else None

    def enter(self, function_name: str, arguments: List[str]) -> "CallFrame":
        """Frame for a nested call sharing this frame's directory."""
        return CallFrame(arguments, self.base_directory, self.depth + 1, function_name)
