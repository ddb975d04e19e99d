"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan los adaptadores concretos.
- Invierte dependencias: el core depende de abstracciones.
"""

from core.interfaces.catalog import CatalogSource, FilterDomainSource

__all__ = ["CatalogSource", "FilterDomainSource"]
