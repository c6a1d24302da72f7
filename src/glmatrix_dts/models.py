"""Records describing documented declarations."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TypeAlias

from glmatrix_dts.typemap import GENERIC_PARAMETER, NO_VALUE

__all__ = ["MethodMap", "Signature"]


@dataclass(frozen=True, slots=True)
class Signature:
    """One documented declaration of a module method.

    Attributes
    ----------
    owning_class : str
        Module or class the declaration belongs to.
    documentation : str
        Raw ``/** ... */`` comment preceding the declaration.
    method_name : str
        Declared identifier.
    is_alias : bool
        True when the body is a reference to another ``<class>.<method>``.
    alias_target_class, alias_target_method : str | None
        Referenced class and method, set iff ``is_alias``.
    parameter_names : tuple[str, ...]
        Parameter identifiers in declaration order.
    parameter_types : tuple[str, ...]
        Resolved types, positionally paired with ``parameter_names``.
    return_type : str
        Resolved return type, ``void`` when undetermined.

    Raises
    ------
    ValueError
        If names and types differ in length, or alias fields disagree with
        ``is_alias``.
    """

    owning_class: str
    documentation: str
    method_name: str
    is_alias: bool = False
    alias_target_class: str | None = None
    alias_target_method: str | None = None
    parameter_names: tuple[str, ...] = ()
    parameter_types: tuple[str, ...] = ()
    return_type: str = NO_VALUE

    def __post_init__(self) -> None:
        if len(self.parameter_names) != len(self.parameter_types):
            msg = (
                f"{self.qualified_name}: {len(self.parameter_names)} parameter names "
                f"but {len(self.parameter_types)} parameter types"
            )
            raise ValueError(msg)
        has_target = self.alias_target_class is not None and self.alias_target_method is not None
        if self.is_alias != has_target:
            msg = f"{self.qualified_name}: alias target must be set iff is_alias"
            raise ValueError(msg)

    @property
    def qualified_name(self) -> str:
        return f"{self.owning_class}.{self.method_name}"

    @property
    def is_self_alias(self) -> bool:
        """True for an alias of another method of the same class."""
        return self.is_alias and self.alias_target_class == self.owning_class

    @property
    def is_cross_class_alias(self) -> bool:
        return self.is_alias and self.alias_target_class != self.owning_class

    @property
    def is_generic(self) -> bool:
        """True when a parameter or the return type is the open generic parameter."""
        return GENERIC_PARAMETER in self.parameter_types or self.return_type == GENERIC_PARAMETER


MethodMap: TypeAlias = Mapping[str, Signature]
