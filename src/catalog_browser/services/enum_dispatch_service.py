"""
Abstract base class for enum-driven polymorphic dispatch services.

Services using this pattern:
1. Define an enum for the kinds of input they handle
2. Register a handler per enum member
3. Determine the member from the input
4. Dispatch to the registered handler

Registration is checked for completeness, so every member of the enum has a
defined handler and dispatch is total over the enum.

Example:
    class Kind(Enum):
        A = "a"
        B = "b"

    class MyService(EnumDispatchService[Kind]):
        strategy_enum = Kind

        def __init__(self):
            super().__init__()
            self._register_handlers({
                Kind.A: self._handle_a,
                Kind.B: self._handle_b,
            })

        def _determine_strategy(self, context, event) -> Kind:
            return event.kind
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TypeVar, Generic, Dict, Callable, Any, Optional, Type
import logging

logger = logging.getLogger(__name__)

# Type variable for the strategy enum
StrategyEnum = TypeVar('StrategyEnum', bound=Enum)


class EnumDispatchService(ABC, Generic[StrategyEnum]):
    """
    Abstract base class for services using enum-driven polymorphic dispatch.

    Subclasses must:
    1. Set strategy_enum to the enum they dispatch over
    2. Implement _determine_strategy() to select the enum member
    3. Register one handler per member in __init__() using _register_handlers()
    """

    strategy_enum: Optional[Type[Enum]] = None

    def __init__(self):
        """Initialize the service with an empty handler registry."""
        self._handlers: Dict[StrategyEnum, Callable] = {}

    def _register_handlers(self, handlers: Dict[StrategyEnum, Callable]) -> None:
        """
        Register strategy handlers.

        Args:
            handlers: Dictionary mapping strategy enum values to handler methods

        Raises:
            ValueError: If handlers dict is empty or misses a member of strategy_enum
        """
        if not handlers:
            raise ValueError(f"{self.__class__.__name__}: Handler registry cannot be empty")

        if self.strategy_enum is not None:
            missing = set(self.strategy_enum) - set(handlers)
            if missing:
                raise ValueError(
                    f"{self.__class__.__name__}: No handler for {sorted(m.name for m in missing)}"
                )

        self._handlers = handlers
        logger.debug(f"{self.__class__.__name__}: Registered {len(handlers)} handlers")

    @abstractmethod
    def _determine_strategy(self, *args, **kwargs) -> StrategyEnum:
        """Determine which handler applies to the given input."""

    def dispatch(self, *args, **kwargs) -> Any:
        """
        Dispatch to the handler registered for the determined strategy.

        All arguments are forwarded to the handler unchanged.

        Raises:
            KeyError: If strategy is not registered in handlers
        """
        strategy = self._determine_strategy(*args, **kwargs)

        if strategy not in self._handlers:
            raise KeyError(
                f"{self.__class__.__name__}: No handler registered for strategy {strategy}. "
                f"Available strategies: {list(self._handlers.keys())}"
            )
        handler = self._handlers[strategy]
        logger.debug(f"{self.__class__.__name__}: Dispatching to {strategy.value} handler")
        return handler(*args, **kwargs)

    def has_strategy(self, strategy: StrategyEnum) -> bool:
        return strategy in self._handlers
