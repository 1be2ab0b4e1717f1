"""
Payroll ledger: employees, salary calculation and payroll statistics.

Allowances and deductions are derived from basic salary through the rate
table in Settings.payroll; gross and net salary are computed on read.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from recordstore.config import Settings
from recordstore.domain.models import Employee
from recordstore.errors import InvalidAmount
from recordstore.ledgers.abstract import AbstractLedger, AmountLike, to_amount
from recordstore.store import RecordStore
from recordstore.utils.logging import get_logger

log = get_logger(__name__)

ZERO = Decimal("0")


def _itemise(total: Decimal, rates: Dict[str, Decimal]) -> Dict[str, Decimal]:
    weight = sum(rates.values(), ZERO)
    if weight == 0:
        return {"other": total} if total else {label: ZERO for label in rates}
    labels = list(rates)
    items = {label: total * rates[label] / weight for label in labels[:-1]}
    # The last item takes the remainder so the items always sum to the total.
    items[labels[-1]] = total - sum(items.values(), ZERO)
    return items


@dataclass(frozen=True)
class SalaryBreakdown:
    employee: Employee
    allowances: Dict[str, Decimal]
    deductions: Dict[str, Decimal]


@dataclass(frozen=True)
class PayrollStatistics:
    count: int
    total_basic: Decimal
    total_allowances: Decimal
    total_deductions: Decimal
    total_gross: Decimal
    total_net: Decimal
    average_net: Decimal
    highest_paid: Optional[Employee]
    lowest_paid: Optional[Employee]


class PayrollLedger(AbstractLedger):
    name: str = "payroll"
    description: str = "Employee register with rate-table salary calculation and pay slips."
    filename: str = "payroll_data.txt"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__(settings)
        self.employees: RecordStore[Employee] = RecordStore(
            Employee, "employee", capacity=self.settings.payroll_capacity
        )
        self._runs = 0

    @property
    def counter(self) -> int:
        """Number of full payroll runs (calculate_all calls)."""
        return self._runs

    @counter.setter
    def counter(self, value: int) -> None:
        self._runs = int(value)

    def stores(self) -> Dict[str, RecordStore[Any]]:
        return {"employees": self.employees}

    def add_employee(self, key: int, name: str, basic_salary: AmountLike) -> Employee:
        """Register an employee with allowances and deductions already calculated."""
        basic = to_amount(basic_salary)
        if not basic.is_finite() or basic < 0:
            raise InvalidAmount(basic)
        rates = self.settings.payroll
        employee = self.employees.insert(
            key,
            name=name,
            basic_salary=basic,
            allowances=rates.allowance_total(basic),
            deductions=rates.deduction_total(basic),
        )
        log.info(f"[EMPLOYEE ADDED] {key}", extra={"key": key, "net": str(employee.net_salary)})
        return employee

    def calculate_salary(self, key: int) -> Employee:
        employee = self.employees.get(key)
        self._apply_rates(employee)
        return employee

    def calculate_all(self) -> List[Employee]:
        employees = self.employees.all()
        for employee in employees:
            self._apply_rates(employee)
        self._runs += 1
        log.info(
            f"[PAYROLL RUN {self._runs}] calculated",
            extra={"employees": len(employees), "total_net": str(self._total_net())},
        )
        return employees

    def breakdown(self, key: int) -> SalaryBreakdown:
        """
        Itemise the stored allowance and deduction totals by rate label.

        Items are shares of the stored totals, weighted by the current rates,
        so they add up to the totals on the slip even when the employee was
        last calculated under another rate table.
        """
        employee = self.employees.get(key)
        rates = self.settings.payroll
        return SalaryBreakdown(
            employee=employee,
            allowances=_itemise(employee.allowances, rates.allowances),
            deductions=_itemise(employee.deductions, rates.deductions),
        )

    def statistics(self) -> PayrollStatistics:
        employees = self.employees.all()
        if not employees:
            return PayrollStatistics(0, ZERO, ZERO, ZERO, ZERO, ZERO, ZERO, None, None)
        total_net = self._total_net()
        return PayrollStatistics(
            count=len(employees),
            total_basic=sum((e.basic_salary for e in employees), ZERO),
            total_allowances=sum((e.allowances for e in employees), ZERO),
            total_deductions=sum((e.deductions for e in employees), ZERO),
            total_gross=sum((e.gross_salary for e in employees), ZERO),
            total_net=total_net,
            average_net=total_net / len(employees),
            highest_paid=max(employees, key=lambda e: e.net_salary),
            lowest_paid=min(employees, key=lambda e: e.net_salary),
        )

    def _apply_rates(self, employee: Employee) -> None:
        rates = self.settings.payroll
        employee.allowances = rates.allowance_total(employee.basic_salary)
        employee.deductions = rates.deduction_total(employee.basic_salary)
        log.debug(f"[SALARY] {employee.key}", extra={"key": employee.key, "net": str(employee.net_salary)})

    def _total_net(self) -> Decimal:
        return sum((e.net_salary for e in self.employees), ZERO)


__all__ = ["PayrollLedger", "PayrollStatistics", "SalaryBreakdown"]
