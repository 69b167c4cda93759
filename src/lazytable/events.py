"""
lazytable.events  ──  Decorators for Record save hooks

    @on.insert("stories")
    def announce(record): ...
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Callable, Dict, List

if TYPE_CHECKING:
    from .core.record import Record

logger = logging.getLogger(__name__)

EVENT_TYPES = ("insert", "update")
ALL_TABLES = "*"


class EventRegistry:
    """Central registry for save handlers"""

    def __init__(self):
        # Maps event type -> table name (or "*") -> handlers, in registration order
        self._handlers: Dict[str, Dict[str, List[Callable]]] = {
            event_type: defaultdict(list) for event_type in EVENT_TYPES
        }

    def register(
        self,
        event_type: str,
        table_names: tuple[str, ...],
        handler: Callable,
    ) -> None:
        """Register a handler for specific tables (all tables when none given)"""
        for name in table_names or (ALL_TABLES,):
            if handler not in self._handlers[event_type][name]:
                self._handlers[event_type][name].append(handler)

    def emit(self, event_type: str, record: Record) -> None:
        """Call every handler registered for the record's table"""
        by_table = self._handlers[event_type]
        handlers = list(by_table.get(record.table.name, ()))
        handlers += [h for h in by_table.get(ALL_TABLES, ()) if h not in handlers]

        for handler in handlers:
            logger.debug("%s hook %r for %s", event_type, handler, record)
            handler(record)

    def clear(self) -> None:
        for by_table in self._handlers.values():
            by_table.clear()


# Global registry instance
_registry = EventRegistry()


class OnDecorator:
    """Namespace for event decorators"""

    @staticmethod
    def insert(*table_names: str) -> Callable:
        """Decorator for handlers run after a record is first written"""

        def decorator(func: Callable) -> Callable:
            _registry.register("insert", table_names, func)
            return func

        return decorator

    @staticmethod
    def update(*table_names: str) -> Callable:
        """Decorator for handlers run after an existing row is rewritten"""

        def decorator(func: Callable) -> Callable:
            _registry.register("update", table_names, func)
            return func

        return decorator


# Export the decorator interface
on = OnDecorator()


def emit_insert(record: Record) -> None:
    _registry.emit("insert", record)


def emit_update(record: Record) -> None:
    _registry.emit("update", record)


def clear_handlers() -> None:
    """Forget every registered handler."""
    _registry.clear()
