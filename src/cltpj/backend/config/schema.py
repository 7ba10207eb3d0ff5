"""Pydantic models describing the tax year configuration schema."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Literal, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


BracketPolicy = Literal["stacking", "deduction"]

_ZERO = Decimal("0")
_ONE = Decimal("1")


def _coerce_decimal(value: Any) -> Any:
    """Convert YAML scalars into exact decimals without binary float noise."""

    if value is None or isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ConfigurationError("Monetary values and rates must be numeric")
    if isinstance(value, (int, float, str)):
        try:
            converted = Decimal(str(value))
        except InvalidOperation as exc:
            raise ConfigurationError(f"'{value}' is not a valid decimal value") from exc
        if not converted.is_finite():
            raise ConfigurationError("Monetary values and rates must be finite")
        return converted
    return value


class TaxBracket(ImmutableModel):
    """Represents a single progressive tax bracket."""

    upper_bound: Decimal | None = Field(default=None, alias="upper")
    rate: Decimal
    deduction: Decimal = _ZERO

    @field_validator("upper_bound", "rate", "deduction", mode="before")
    @classmethod
    def _coerce_numbers(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        if self.rate < _ZERO or self.rate > _ONE:
            raise ConfigurationError("Tax rates must be between 0 and 1")
        if self.upper_bound is not None and self.upper_bound <= _ZERO:
            raise ConfigurationError("Upper bounds must be positive values")
        if self.deduction < _ZERO:
            raise ConfigurationError("Bracket deductions must be non-negative")
        return self


class BracketTable(ImmutableModel):
    """Ordered bracket schedule tagged with its evaluation policy.

    ``stacking`` tables accumulate each slice of the amount at its own rate and
    may saturate at a fixed ``ceiling``. ``deduction`` tables apply the rate of
    the bracket containing the amount and subtract that bracket's deduction.
    """

    policy: BracketPolicy
    brackets: Sequence[TaxBracket]
    ceiling: Decimal | None = None

    @field_validator("brackets", mode="before")
    @classmethod
    def _coerce_brackets(cls, value: Any) -> Any:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
            raise ConfigurationError("Bracket tables must define a list of brackets")
        return tuple(value)

    @field_validator("ceiling", mode="before")
    @classmethod
    def _coerce_ceiling(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    @model_validator(mode="after")
    def _validate_table(self) -> Self:
        self._validate_bracket_sequence(self.brackets)
        if self.ceiling is not None:
            if self.policy != "stacking":
                raise ConfigurationError("Only stacking tables may declare a ceiling")
            if self.ceiling < _ZERO:
                raise ConfigurationError("Contribution ceilings must be non-negative")
        if self.policy == "stacking" and any(
            bracket.deduction != _ZERO for bracket in self.brackets
        ):
            raise ConfigurationError("Stacking tables cannot declare bracket deductions")
        return self

    @staticmethod
    def _validate_bracket_sequence(brackets: Sequence[TaxBracket]) -> None:
        if not brackets:
            raise ConfigurationError("At least one tax bracket must be defined")
        last_upper: Decimal | None = None
        for bracket in brackets[:-1]:
            upper = bracket.upper_bound
            if upper is None:
                raise ConfigurationError("Only the final tax bracket may be unbounded")
            if last_upper is not None and upper <= last_upper:
                raise ConfigurationError("Tax brackets must be in ascending order")
            last_upper = upper
        if brackets[-1].upper_bound is not None:
            raise ConfigurationError("Final tax bracket must have an open upper bound")

    @property
    def last_finite_bound(self) -> Decimal | None:
        """Return the highest explicit upper bound, if any."""

        if len(self.brackets) < 2:
            return None
        return self.brackets[-2].upper_bound


class CltConfig(ImmutableModel):
    """Configuration for salaried (CLT) compensation."""

    social_security: BracketTable
    income_tax: BracketTable
    severance_fund_rate: Decimal = Decimal("0.08")
    profit_share_multiplier: Decimal = _ONE
    vacation_bonus_divisor: Decimal = Decimal("3")
    months_per_year: int = 12

    @field_validator(
        "severance_fund_rate",
        "profit_share_multiplier",
        "vacation_bonus_divisor",
        mode="before",
    )
    @classmethod
    def _coerce_factors(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    @model_validator(mode="after")
    def _validate_config(self) -> CltConfig:
        if self.social_security.policy != "stacking":
            raise ConfigurationError("Social security tables must use the stacking policy")
        if self.income_tax.policy != "deduction":
            raise ConfigurationError("Income tax tables must use the deduction policy")
        if self.severance_fund_rate < _ZERO or self.severance_fund_rate > _ONE:
            raise ConfigurationError("Severance fund rate must be between 0 and 1")
        if self.profit_share_multiplier < _ZERO:
            raise ConfigurationError("Profit share multiplier must be non-negative")
        if self.vacation_bonus_divisor <= _ZERO:
            raise ConfigurationError("Vacation bonus divisor must be positive")
        if self.months_per_year <= 0:
            raise ConfigurationError("Months per year must be a positive integer")
        return self


class PjConfig(ImmutableModel):
    """Configuration for contractor (PJ) invoicing."""

    flat_tax_rate: Decimal
    months_per_year: int = 12

    @field_validator("flat_tax_rate", mode="before")
    @classmethod
    def _coerce_rate(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    @model_validator(mode="after")
    def _validate_config(self) -> PjConfig:
        if self.flat_tax_rate < _ZERO or self.flat_tax_rate > _ONE:
            raise ConfigurationError("PJ flat tax rate must be between 0 and 1")
        if self.months_per_year <= 0:
            raise ConfigurationError("Months per year must be a positive integer")
        return self


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year configuration."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    clt: CltConfig
    pj: PjConfig

    @model_validator(mode="before")
    @classmethod
    def _validate_sections(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        for section in ("clt", "pj"):
            if not isinstance(prepared.get(section), Mapping):
                raise ConfigurationError(f"Configuration requires a '{section}' section")

        return prepared


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "BracketPolicy",
    "BracketTable",
    "CltConfig",
    "ConfigurationError",
    "ImmutableModel",
    "PjConfig",
    "TaxBracket",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
    "YearConfiguration",
]
