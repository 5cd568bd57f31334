"""
Dependency Injection Container.

This module provides a simple DI container that wires the configuration,
the application logger and the admin store together for the batch runner.
"""

import logging
from typing import Any, Callable, Dict, List, Type


logger = logging.getLogger(__name__)


class DIContainer:
    """
    Simple dependency injection container.

    Supports:
    - Service registration with factory functions
    - Singleton pattern for shared instances
    - Instance registration for already-built services

    Examples:
        >>> container = DIContainer()
        >>> container.register(Config, Config, singleton=True)
        >>> container.register(
        ...     AdminStore,
        ...     lambda: AdminStore(load_seed(container.resolve(Config).seed_path)),
        ...     singleton=True,
        ... )
        >>> store = container.resolve(AdminStore)
    """

    def __init__(self):
        """Initialize empty container."""
        self._services: Dict[Type, Callable[[], Any]] = {}
        self._singletons: Dict[Type, Any] = {}
        self._singleton_flags: Dict[Type, bool] = {}

        logger.debug("DI Container initialized")

    def register(
        self,
        interface: Type,
        implementation: Callable[[], Any],
        singleton: bool = False
    ):
        """
        Register a service factory.

        Args:
            interface: Service type used as the lookup key
            implementation: Factory function that creates the service
            singleton: Whether to create a single shared instance

        Re-registering a type replaces the factory and drops any cached
        singleton.
        """
        self._services[interface] = implementation
        self._singleton_flags[interface] = singleton
        self._singletons.pop(interface, None)

        logger.debug(
            f"Registered service: {interface.__name__} "
            f"(singleton={singleton})"
        )

    def register_instance(self, interface: Type, instance: Any):
        """Register an already-built instance as a singleton."""
        self.register(interface, lambda: instance, singleton=True)
        self._singletons[interface] = instance

    def resolve(self, interface: Type) -> Any:
        """
        Resolve a service from the container.

        Args:
            interface: Service type to resolve

        Returns:
            Service instance

        Raises:
            ValueError: If service is not registered
        """
        if interface not in self._services:
            raise ValueError(
                f"Service not registered: {interface.__name__}. "
                f"Available services: {', '.join(self.get_registered_services())}"
            )

        if self._singleton_flags[interface]:
            if interface not in self._singletons:
                logger.debug(f"Creating singleton instance: {interface.__name__}")
                self._singletons[interface] = self._services[interface]()
            return self._singletons[interface]

        logger.debug(f"Creating transient instance: {interface.__name__}")
        return self._services[interface]()

    def is_registered(self, interface: Type) -> bool:
        return interface in self._services

    def clear(self):
        """Clear all registered services."""
        self._services.clear()
        self._singletons.clear()
        self._singleton_flags.clear()
        logger.debug("DI Container cleared")

    def get_registered_services(self) -> List[str]:
        return [service.__name__ for service in self._services]


def configure_default_services(
    container: DIContainer,
    app_config=None,
    seed_path=None,
):
    """
    Configure default services for the application.

    Registers, as singletons:
    - Config (the module-level instance unless ``app_config`` is given)
    - logging.Logger set up at the configured level
    - AdminStore built from the configured seed, with the action validator
      when strict validation is on

    Args:
        container: DI container to configure
        app_config: Optional Config to use instead of the module instance
        seed_path: Optional seed file overriding the configured one

    Examples:
        >>> container = DIContainer()
        >>> configure_default_services(container)
        >>> store = container.resolve(AdminStore)
    """
    from ..seed import load_seed
    from ..store.store import AdminStore
    from ..validation.action_validator import ActionValidator
    from .config import Config, config
    from .logger import setup_logger

    settings = app_config if app_config is not None else config

    container.register(Config, lambda: settings, singleton=True)

    container.register(
        logging.Logger,
        lambda: setup_logger(
            "admin_console",
            level=getattr(logging, container.resolve(Config).log_level, logging.INFO)
        ),
        singleton=True
    )

    def create_store() -> AdminStore:
        cfg = container.resolve(Config)
        return AdminStore(
            load_seed(seed_path or cfg.seed_path),
            validator=ActionValidator() if cfg.strict_validation else None,
            stats_check=cfg.stats_check,
        )

    container.register(AdminStore, create_store, singleton=True)

    logger.info("Default services configured")
