"""
Shared plumbing for worksheet strategies.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from fxba.core.errors import InvalidInputError, NumericOverflowError
from fxba.core.features import Feature, is_available
from fxba.core.interfaces import IWorksheet

if TYPE_CHECKING:
    from fxba.core.calculator import Calculator


class BaseWorksheet(IWorksheet):
    """
    Label-to-attribute worksheet.

    Subclasses declare ``FIELDS`` (label -> attribute on :meth:`target`),
    ``COMPUTED`` (labels CPT can solve) and ``FEATURES`` (label -> feature
    gating its computation), then implement :meth:`_compute`.
    """

    kind: str = ""
    feature: Feature | None = None

    FIELDS: dict[str, str] = {}
    COMPUTED: frozenset[str] = frozenset()
    FEATURES: dict[str, Feature] = {}

    def target(self, calc: Calculator) -> Any:
        raise NotImplementedError

    def variables(self, calc: Calculator) -> list[str]:
        return list(self.FIELDS)

    def is_computable(self, calc: Calculator, var: str) -> bool:
        return var in self.COMPUTED

    def is_storable(self, calc: Calculator, var: str) -> bool:
        return True

    def feature_for(self, calc: Calculator, var: str) -> Feature | None:
        return self.FEATURES.get(var)

    def require(self, calc: Calculator, feature: Feature | None) -> None:
        """Raise InvalidInputError if ``feature`` is not on this model."""
        if feature is not None and not is_available(calc.model, feature):
            raise InvalidInputError(
                f"{feature.value} requires the {calc.model.toggled().display_name}"
            )

    def recall(self, calc: Calculator, var: str) -> float:
        return float(getattr(self.target(calc), self._field(var)))

    def store(self, calc: Calculator, var: str, value: float) -> None:
        setattr(self.target(calc), self._field(var), float(value))

    def compute(self, calc: Calculator, var: str) -> float:
        if not self.is_computable(calc, var):
            raise InvalidInputError(f"{var} cannot be computed")
        self.require(calc, self.feature)
        self.require(calc, self.feature_for(calc, var))
        try:
            value = float(self._compute(calc, var))
        except OverflowError as exc:
            raise NumericOverflowError() from exc
        if not math.isfinite(value):
            raise NumericOverflowError(f"{var} is not finite")
        return value

    def _compute(self, calc: Calculator, var: str) -> float:
        raise NotImplementedError

    def record(self, calc: Calculator, var: str, value: float) -> None:
        self.store(calc, var, value)

    def cycle_setting(self, calc: Calculator) -> None:
        """No setting by default."""

    def reset(self, calc: Calculator) -> None:
        raise NotImplementedError

    def _field(self, var: str) -> str:
        try:
            return self.FIELDS[var]
        except KeyError:
            raise InvalidInputError(f"unknown {self.kind} variable {var!r}") from None
