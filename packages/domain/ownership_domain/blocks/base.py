"""Base classes for computation blocks.

This module provides the foundation for the reporting blocks:
- BlockContext for passing data between blocks
- Block abstract base class
- BlockExecutor, which orders blocks so producers run before consumers
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field


# =============================================================================
# Block Context
# =============================================================================

@dataclass
class BlockContext:
    """Keyed bag of inputs and outputs shared by blocks.

    Example:
        context = BlockContext()
        context.set("enterprise", enterprise)
        OwnershipBlock().execute(context)
        holdings_df = context.get("investor_holdings")
    """

    _data: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str) -> Any:
        """Get value from context.

        Raises:
            KeyError: If key not found in context
        """
        if key not in self._data:
            raise KeyError(f"Key '{key}' not found in context. Available keys: {list(self._data.keys())}")
        return self._data[key]

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def has(self, key: str) -> bool:
        return key in self._data

    def keys(self) -> List[str]:
        return list(self._data.keys())


# =============================================================================
# Block Base Class
# =============================================================================

class Block(ABC):
    """A reusable computation unit with declared inputs and outputs.

    Subclasses read inputs() keys from the context in execute() and must
    write every outputs() key back to it.
    """

    @abstractmethod
    def inputs(self) -> List[str]:
        """Context keys this block reads."""
        pass

    @abstractmethod
    def outputs(self) -> List[str]:
        """Context keys this block writes."""
        pass

    @abstractmethod
    def execute(self, context: BlockContext) -> None:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(inputs={self.inputs()}, outputs={self.outputs()})"


# =============================================================================
# Dependency Resolution
# =============================================================================

class CircularDependencyError(Exception):
    """Raised when blocks have circular dependencies."""
    pass


def order_blocks(blocks: List[Block]) -> List[Block]:
    """Order blocks so each runs after the blocks producing its inputs.

    Blocks with no dependency between them keep their given order. Inputs
    no block produces are expected in the initial context.

    Raises:
        ValueError: If two blocks declare the same output
        CircularDependencyError: If the dependencies form a cycle
    """
    producers: Dict[str, Block] = {}
    for block in blocks:
        for key in block.outputs():
            if key in producers:
                raise ValueError(f"Multiple blocks produce '{key}': {producers[key]} and {block}")
            producers[key] = block

    ordered: List[Block] = []
    pending = list(blocks)
    while pending:
        ready = [
            block for block in pending
            if all(
                producers.get(key) is None or producers[key] in ordered
                for key in block.inputs()
            )
        ]
        if not ready:
            raise CircularDependencyError(f"Circular dependency detected among blocks: {pending}")
        ordered.extend(ready)
        pending = [block for block in pending if block not in ready]

    return ordered


# =============================================================================
# Block Executor
# =============================================================================

class BlockExecutor:
    """Executes blocks in dependency order, checking inputs and outputs.

    Example:
        context = BlockContext()
        context.set("enterprise", enterprise)
        BlockExecutor([AssetHoldingsBlock(), OwnershipBlock()]).execute(context)
    """

    def __init__(self, blocks: List[Block]):
        self.blocks = blocks
        self._ordered: Optional[List[Block]] = None

    def execute(self, context: BlockContext) -> BlockContext:
        """Run every block and return the context with all outputs.

        Raises:
            CircularDependencyError: If blocks have circular dependencies
            KeyError: If a required input is not available
            ValueError: If a block does not write a declared output
        """
        if self._ordered is None:
            self._ordered = order_blocks(self.blocks)

        for block in self._ordered:
            for key in block.inputs():
                if not context.has(key):
                    raise KeyError(
                        f"Block {block} requires input '{key}' but it's not in context. "
                        f"Available keys: {context.keys()}"
                    )
            block.execute(context)
            for key in block.outputs():
                if not context.has(key):
                    raise ValueError(f"Block {block} declared output '{key}' but didn't write it to context")

        return context
