"""Registry of hypervolume calculator backends.

Backends are registered by name so the configuration layer can pick one from a
plain string (``--calculator pymoo``, ``HV_MANAGER_CALCULATOR=external``)
without importing implementation classes.

Basic usage:
    ```python
    from hv_manager.registry import CalculatorRegistry

    CalculatorRegistry.register("constant", lambda value=1.0: ConstantCalculator(value))
    calculator = CalculatorRegistry.get("constant", value=0.5)

    available = CalculatorRegistry.list()  # ["constant", "external", "pymoo"]
    ```
"""

from collections.abc import Callable

from hv_manager.calculators import ExternalHypervolumeCalculator, PymooHypervolumeCalculator
from hv_manager.protocols import IndicatorCalculator


class CalculatorRegistry:
    """Registry for IndicatorCalculator factories.

    Factories accept keyword arguments and return a configured calculator, so
    backend-specific options (executable path, timeout) are supplied at
    retrieval time.

    Class Attributes:
        _registry: Dictionary mapping backend names to factory functions.
    """

    _registry: dict[str, Callable[..., IndicatorCalculator]] = {}

    @classmethod
    def register(cls, name: str, factory: Callable[..., IndicatorCalculator]) -> None:
        """Register a calculator factory. Overwrites an existing entry with the same name."""
        cls._registry[name] = factory

    @classmethod
    def get(cls, name: str, **kwargs) -> IndicatorCalculator:
        """Create a configured calculator by name.

        Args:
            name: Name of the registered backend.
            **kwargs: Configuration parameters passed to the factory function.

        Returns:
            A configured IndicatorCalculator.

        Raises:
            KeyError: If the backend name is not registered. The message lists
                the available backends.
        """
        if name not in cls._registry:
            available = ", ".join(sorted(cls._registry.keys())) or "none"
            raise KeyError(f"Calculator '{name}' not found. Available calculators: {available}")
        factory = cls._registry[name]
        return factory(**kwargs)

    @classmethod
    def list(cls) -> list[str]:
        """Return sorted list of registered backend names."""
        return sorted(cls._registry.keys())


def _pymoo_factory(**_: object) -> IndicatorCalculator:
    # pymoo needs no executable or timeout; ignore backend options meant for others
    return PymooHypervolumeCalculator()


CalculatorRegistry.register("external", ExternalHypervolumeCalculator)
CalculatorRegistry.register("pymoo", _pymoo_factory)


def list_calculators() -> list[str]:
    """List all registered calculator backends."""
    return CalculatorRegistry.list()
