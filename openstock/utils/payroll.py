# openstock/utils/payroll.py
from dataclasses import dataclass

# Fixed statutory rates applied to gross pay when a period is generated
TAX_RATE = 0.15
SOCIAL_SECURITY_RATE = 0.08
HEALTH_INSURANCE_RATE = 0.03


class PayrollError(ValueError):
    pass


def _money(value: float) -> float:
    return round(value, 2)


@dataclass(frozen=True)
class PayComponents:
    """Every input of a payroll run; gross and net are always derived from these."""

    base_salary: float = 0.0
    overtime_pay: float = 0.0
    bonuses: float = 0.0
    deductions: float = 0.0
    tax_amount: float = 0.0
    social_security: float = 0.0
    health_insurance: float = 0.0
    other_deductions: float = 0.0

    @property
    def gross_pay(self) -> float:
        return _money(self.base_salary + self.overtime_pay + self.bonuses)

    @property
    def total_deductions(self) -> float:
        return _money(
            self.deductions
            + self.tax_amount
            + self.social_security
            + self.health_insurance
            + self.other_deductions
        )

    @property
    def net_pay(self) -> float:
        return _money(self.gross_pay - self.total_deductions)


def components_from(values: dict) -> PayComponents:
    """Build components from a mapping, treating missing or null entries as zero."""
    fields = PayComponents.__dataclass_fields__
    return PayComponents(**{name: float(values.get(name) or 0) for name in fields})


def statutory_components(base_salary: float) -> PayComponents:
    """Components of a freshly generated run: no overtime or bonuses yet."""
    gross = base_salary or 0.0
    return PayComponents(
        base_salary=gross,
        tax_amount=_money(gross * TAX_RATE),
        social_security=_money(gross * SOCIAL_SECURITY_RATE),
        health_insurance=_money(gross * HEALTH_INSURANCE_RATE),
    )


# Allowed lifecycle moves for a payroll period; completed and cancelled are terminal
PERIOD_TRANSITIONS = {
    "draft": {"draft", "processing", "completed", "cancelled"},
    "processing": {"processing", "completed", "cancelled"},
    "completed": {"completed"},
    "cancelled": {"cancelled"},
}


def check_period_transition(current: str, new: str) -> None:
    if new not in PERIOD_TRANSITIONS.get(current, set()):
        raise PayrollError(f"Payroll period cannot move from '{current}' to '{new}'")
