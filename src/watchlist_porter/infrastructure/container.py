"""Dependency injection container."""

import inspect
import logging
from functools import lru_cache
from typing import Any, Dict, Optional, Type, TypeVar

from ..config import Config, ConfigManager
from ..core.interfaces import (
    IBulkImporter,
    ICatalogService,
    IExportFormatter,
    IPreviewBuilder,
    IWatchlistStore,
)

T = TypeVar("T")


class Container:
    """Dependency injection container using registry pattern."""

    def __init__(self, config_manager: Optional[ConfigManager] = None) -> None:
        """Initialize container.

        Args:
            config_manager: Configuration manager instance. If None, creates default.
        """
        self._services: Dict[Type, Any] = {}
        self._singletons: Dict[Type, Any] = {}
        self._config_manager = config_manager or ConfigManager()
        self._logger = logging.getLogger(__name__)

    def register_singleton(self, interface: Type[T], implementation: Type[Any]) -> None:
        """Register a singleton service.

        Args:
            interface: Interface type.
            implementation: Implementation type.
        """
        self._services[interface] = implementation
        self._logger.debug(
            f"Registered singleton: {interface.__name__} -> {implementation.__name__}"
        )

    def register_instance(self, interface: Type[T], instance: T) -> None:
        """Register a specific instance.

        Args:
            interface: Interface type.
            instance: Pre-created instance.
        """
        self._singletons[interface] = instance
        self._logger.debug(f"Registered instance: {interface.__name__}")

    def get(self, interface: Type[T]) -> T:
        """Get service instance.

        Args:
            interface: Interface type to resolve.

        Returns:
            Service instance.

        Raises:
            ValueError: If service is not registered.
        """
        if interface in self._singletons:
            return self._singletons[interface]  # type: ignore

        if interface in self._services:
            implementation = self._services[interface]
            instance = self._create_instance(implementation)
            self._singletons[interface] = instance
            return instance  # type: ignore

        raise ValueError(f"Service not registered: {interface.__name__}")

    def _create_instance(self, implementation: Type[T]) -> T:
        """Create instance with dependency injection.

        Args:
            implementation: Implementation class to instantiate.

        Returns:
            Created instance with dependencies injected.
        """
        sig = inspect.signature(implementation.__init__)
        kwargs = {}

        for param_name, param in sig.parameters.items():
            if param_name == "self":
                continue

            if param.annotation == Config:
                kwargs[param_name] = self.get_config()
            elif hasattr(param.annotation, "__origin__"):
                # Optional/generic parameters are left to their defaults
                continue
            elif (
                param.annotation in self._services
                or param.annotation in self._singletons
            ):
                kwargs[param_name] = self.get(param.annotation)
            elif param.default is not inspect.Parameter.empty:
                continue
            else:
                self._logger.warning(
                    f"Cannot resolve dependency: {param_name} of type {param.annotation}"
                )

        return implementation(**kwargs)

    @lru_cache(maxsize=1)
    def get_config(self) -> Config:
        """Get configuration instance.

        Returns:
            Configuration instance.
        """
        return self._config_manager.get_config()

    def configure_default_services(self) -> None:
        """Configure default service registrations."""
        from ..core.services import (
            BulkImportCommitter,
            ExportFormatter,
            HttpWatchlistStore,
            InMemoryWatchlistStore,
            JsonFileWatchlistStore,
            PreviewBuilder,
            TMDbCatalogService,
        )

        config = self.get_config()

        # Store backend
        store_backends = {
            "memory": InMemoryWatchlistStore,
            "json": JsonFileWatchlistStore,
            "http": HttpWatchlistStore,
        }
        if config.store.backend not in store_backends:
            raise ValueError(f"Unsupported store backend: {config.store.backend}")

        store_cls = store_backends[config.store.backend]
        self.register_singleton(IWatchlistStore, store_cls)  # type: ignore

        self.register_singleton(ICatalogService, TMDbCatalogService)  # type: ignore
        self.register_singleton(IPreviewBuilder, PreviewBuilder)  # type: ignore
        self.register_singleton(IBulkImporter, BulkImportCommitter)  # type: ignore
        self.register_singleton(IExportFormatter, ExportFormatter)  # type: ignore

        self._logger.info(f"Default services configured (store backend: {config.store.backend})")

    async def aclose(self) -> None:
        """Close network and store resources held by created services."""
        for interface in (ICatalogService, IWatchlistStore):
            service = self._singletons.get(interface)
            if service is not None:
                await service.close()

