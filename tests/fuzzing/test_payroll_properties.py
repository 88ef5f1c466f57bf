"""
Hypothesis-based property tests.

Boundaries fuzzed here:
- Withholding: any salary and rate split exactly into tax + net with floor
  rounding
- Payment: any value >= salary is accepted, any value < salary rejected
- History views: employer and employee filters are exact, ordered
  subsequences of the full payment trail
"""

from uuid import uuid4

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from payroll_kernel.domain.tax import MAX_TAX_RATE, compute_withholding
from payroll_kernel.exceptions import InsufficientFundsError

salaries = st.integers(min_value=0, max_value=10**15)
rates = st.integers(min_value=0, max_value=MAX_TAX_RATE)

DB_SETTINGS = settings(
    max_examples=15,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture, HealthCheck.too_slow],
)


class TestWithholdingProperties:
    @given(salary=salaries, rate=rates)
    def test_tax_plus_net_is_salary(self, salary, rate):
        result = compute_withholding(salary, rate)
        assert result.tax + result.net == salary
        assert 0 <= result.tax <= salary

    @given(salary=salaries, rate=rates)
    def test_tax_is_floor_of_exact_share(self, salary, rate):
        result = compute_withholding(salary, rate)
        # tax <= salary * rate / 100 < tax + 1
        assert result.tax * 100 <= salary * rate < (result.tax + 1) * 100

    @given(salary=salaries, low=rates, high=rates)
    def test_tax_monotonic_in_rate(self, salary, low, high):
        if low > high:
            low, high = high, low
        assert compute_withholding(salary, low).tax <= compute_withholding(salary, high).tax


def _verified(ledger, employer: str, employee: str, salary: int, rate: int = 0) -> None:
    ledger.add_employee(employer, employee, employee, salary=salary)
    ledger.submit_kyc(employee, f"evidence-{employee}")
    ledger.approve_kyc(ledger.administrator, employee)
    if rate:
        ledger.set_tax_rate(employer, employee, rate)


class TestPaymentProperties:
    @DB_SETTINGS
    @given(
        salary=st.integers(min_value=0, max_value=10**9),
        rate=rates,
        surplus=st.integers(min_value=0, max_value=10**6),
    )
    def test_any_covering_value_pays_exact_net(self, ledger, salary, rate, surplus):
        tag = uuid4().hex[:8]
        employer, employee = f"0xA-{tag}", f"0xB-{tag}"
        ledger.register_employer(employer, "Acme")
        _verified(ledger, employer, employee, salary, rate)
        custody_before = ledger.custody_balance()

        payment = ledger.process_payment(employer, employee, value=salary + surplus)

        expected = compute_withholding(salary, rate)
        assert payment.amount == expected.net
        assert payment.tax == expected.tax
        assert ledger.balance_of(employee) == expected.net
        assert ledger.custody_balance() - custody_before == expected.tax + surplus

    @DB_SETTINGS
    @given(
        salary=st.integers(min_value=1, max_value=10**9),
        shortfall=st.integers(min_value=1, max_value=10**9),
    )
    def test_any_short_value_rejected(self, ledger, salary, shortfall):
        tag = uuid4().hex[:8]
        employer, employee = f"0xA-{tag}", f"0xB-{tag}"
        ledger.register_employer(employer, "Acme")
        _verified(ledger, employer, employee, salary)

        with pytest.raises(InsufficientFundsError):
            ledger.process_payment(employer, employee, value=max(salary - shortfall, 0))

        assert ledger.view_my_payment_history(employee) == []


class TestHistoryFilterProperties:
    @DB_SETTINGS
    @given(plan=st.lists(st.tuples(st.integers(0, 2), st.integers(0, 1)), max_size=12))
    def test_views_are_ordered_subsequences(self, ledger, plan):
        tag = uuid4().hex[:8]
        employers = [f"0xA{i}-{tag}" for i in range(3)]
        employees = {
            (i, j): f"0xB{i}{j}-{tag}" for i in range(3) for j in range(2)
        }
        for i, employer in enumerate(employers):
            ledger.register_employer(employer, employer)
            for j in range(2):
                _verified(ledger, employer, employees[(i, j)], salary=10 + j)

        paid = [
            ledger.process_payment(employers[i], employees[(i, j)], value=10 + j)
            for i, j in plan
        ]

        for i, employer in enumerate(employers):
            expected = [p.seq for (pi, _), p in zip(plan, paid) if pi == i]
            assert [p.seq for p in ledger.view_payment_history(employer)] == expected
        for (i, j), employee in employees.items():
            expected = [p.seq for (pi, pj), p in zip(plan, paid) if (pi, pj) == (i, j)]
            assert [p.seq for p in ledger.view_my_payment_history(employee)] == expected
