"""Two-pass store of extracted signatures.

Pass 1 (:meth:`SignatureRegistry.register_pass`) freezes one method map per
class. Pass 2 (:meth:`SignatureRegistry.resolve`) builds a new map in which
every same-class alias carries the shape and documentation of the method it
refers to and every cross-class alias shows its target's documentation;
stored records are never modified.
"""

from __future__ import annotations

from dataclasses import replace
from types import MappingProxyType
from typing import TYPE_CHECKING

from glmatrix_dts.errors import RegistryError, UnresolvedAliasError
from glmatrix_dts.logging import get_logger, with_fields
from glmatrix_dts.render import render_signature

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from glmatrix_dts.config import GeneratorConfig
    from glmatrix_dts.models import MethodMap, Signature

__all__ = ["SignatureRegistry"]

LOGGER = get_logger(__name__)


class SignatureRegistry:
    """Per-run mapping of class name to its method map.

    Examples
    --------
    >>> registry = SignatureRegistry()
    >>> registry.register_pass("vec2", [])
    mappingproxy({})
    >>> "vec2" in registry
    True
    """

    def __init__(self) -> None:
        self._classes: dict[str, MethodMap] = {}

    def __contains__(self, klass: object) -> bool:
        return klass in self._classes

    def __iter__(self) -> Iterator[str]:
        return iter(self._classes)

    def __len__(self) -> int:
        return len(self._classes)

    def register_pass(self, klass: str, signatures: Iterable[Signature]) -> MethodMap:
        """Store the method map of ``klass``.

        Parameters
        ----------
        klass : str
            Class being registered.
        signatures : Iterable[Signature]
            Extracted records in source order. A repeated method name keeps its
            first position and its last record.

        Returns
        -------
        MethodMap
            Read-only view of the stored map.

        Raises
        ------
        RegistryError
            If ``klass`` was already registered.
        """
        if klass in self._classes:
            msg = f"{klass} is already registered"
            raise RegistryError(msg, context={"klass": klass})
        methods: dict[str, Signature] = {}
        for signature in signatures:
            methods[signature.method_name] = signature
        frozen = MappingProxyType(methods)
        self._classes[klass] = frozen
        LOGGER.debug(
            "Registered %d methods for %s",
            len(methods),
            klass,
            extra={"operation": "register", "klass": klass, "count": len(methods)},
        )
        return frozen

    def method_map(self, klass: str) -> MethodMap:
        try:
            return self._classes[klass]
        except KeyError as exc:
            msg = f"{klass} has not been registered"
            raise RegistryError(msg, context={"klass": klass}) from exc

    def lookup(self, klass: str, method: str) -> Signature:
        """Return the registered record for ``klass.method``.

        Raises
        ------
        UnresolvedAliasError
            If the class or the method is unknown.
        """
        methods = self._classes.get(klass)
        if methods is None or method not in methods:
            msg = f"alias target {klass}.{method} is not registered"
            raise UnresolvedAliasError(msg, context={"klass": klass, "method": method})
        return methods[method]

    def resolve_target(self, klass: str, method: str) -> Signature:
        """Return the record giving the shape of ``klass.method``.

        Same-class aliases are followed to the method they refer to.

        Raises
        ------
        UnresolvedAliasError
            If the method is unknown or its alias chain loops.
        """
        return self._follow_self_alias(self.lookup(klass, method))

    def resolve(self, klass: str) -> MethodMap:
        """Return a new map of ``klass`` with every self-alias resolved.

        A resolved self-alias keeps its own name and alias target but takes
        the documentation, parameters and return type of the method it
        refers to, following chains of aliases. A cross-class alias already
        carries its target's shape and takes the target's documentation.

        Raises
        ------
        UnresolvedAliasError
            If an alias chain ends at an unknown method or loops.
        """
        methods = self.method_map(klass)
        logger = with_fields(LOGGER, operation="resolve", klass=klass)
        resolved: dict[str, Signature] = {}
        for name, signature in methods.items():
            if signature.is_self_alias:
                target = self._follow_self_alias(signature)
                logger.debug(
                    "Resolved %s -> %s.%s",
                    signature.qualified_name,
                    target.owning_class,
                    target.method_name,
                    extra={"method": name},
                )
                resolved[name] = replace(
                    signature,
                    documentation=target.documentation,
                    parameter_names=target.parameter_names,
                    parameter_types=target.parameter_types,
                    return_type=target.return_type,
                )
            elif signature.is_cross_class_alias:
                target = self.resolve_target(
                    signature.alias_target_class or "", signature.alias_target_method or ""
                )
                resolved[name] = replace(signature, documentation=target.documentation)
            else:
                resolved[name] = signature
        return MappingProxyType(resolved)

    def _follow_self_alias(self, signature: Signature) -> Signature:
        seen = {signature.qualified_name}
        current = signature
        while current.is_self_alias:
            current = self.lookup(current.owning_class, current.alias_target_method or "")
            if current.qualified_name in seen:
                msg = f"alias cycle through {current.qualified_name}"
                raise UnresolvedAliasError(
                    msg, context={"klass": current.owning_class, "method": current.method_name}
                )
            seen.add(current.qualified_name)
        return current

    def resolve_and_render(self, klass: str, config: GeneratorConfig) -> list[str]:
        """Resolve ``klass`` and render its declarations in emission order."""
        return [render_signature(signature, config) for signature in self.resolve(klass).values()]
