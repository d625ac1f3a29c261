"""Unit tests for the receivables, payment plan, commission and invoice calculators."""

import pytest
from datetime import date, datetime, timedelta

from dental_billing.calculators import summarize_billing
from dental_billing.calculators.commissions import (
    AttributionMode,
    available_periods,
    commission_csv_filename,
    commission_to_csv,
    compute_commissions,
    current_period,
    parse_period,
    update_commission_status,
)
from dental_billing.calculators.invoices import (
    DraftLine,
    build_invoice,
    record_invoice_payment,
)
from dental_billing.calculators.payment_plans import (
    create_payment_plan,
    plan_progress,
    record_installment_payment,
    refresh_installment_statuses,
)
from dental_billing.calculators.receivables import (
    compute_receivables,
    summarize_receivables,
)
from dental_billing.schemas import (
    CommissionStatus,
    InstallmentStatus,
    Invoice,
    InvoiceLineItem,
    InvoiceStatus,
    Patient,
    PaymentMethod,
    PaymentPlan,
    Provider,
    ServiceItem,
    UserRole,
    ValidationResult,
    ValidationSeverity,
    ValidationStatus,
)

NOW = datetime(2025, 3, 15, 10, 0, 0)


def _make_invoice(
    invoice_id: str = "inv-1",
    patient_id: str = "p1",
    amount: float = 100.0,
    paid_amount: float = 0.0,
    status: InvoiceStatus = InvoiceStatus.PENDING,
    invoice_date: date = date(2025, 3, 10),
    items: list[InvoiceLineItem] | None = None,
) -> Invoice:
    """Helper to create an Invoice for testing."""
    return Invoice(
        id=invoice_id,
        patient_id=patient_id,
        date=invoice_date,
        amount=amount,
        paid_amount=paid_amount,
        status=status,
        items=items if items is not None else [InvoiceLineItem(description="Consulta", price=amount)],
    )


def _make_patient(patient_id: str = "p1", name: str = "Ana Torres") -> Patient:
    return Patient(id=patient_id, name=name)


def _make_provider(
    provider_id: str = "d1",
    role: UserRole = UserRole.DENTIST,
    commission_rate: float | None = None,
) -> Provider:
    return Provider(
        id=provider_id,
        name=f"Dr. {provider_id}",
        role=role,
        commission_rate=commission_rate,
    )


# ============================================================================
# RECEIVABLES TESTS
# ============================================================================


class TestReceivables:
    """Tests for per-patient receivable aggregation."""

    def test_total_debt_matches_open_balances(self):
        """Sum of total_debt equals the remaining balance of every open invoice."""
        invoices = [
            _make_invoice("inv-1", "p1", amount=100.0),
            _make_invoice("inv-2", "p1", amount=250.0, paid_amount=100.0, status=InvoiceStatus.PARTIALLY_PAID),
            _make_invoice("inv-3", "p2", amount=80.0),
            _make_invoice("inv-4", "p2", amount=500.0, paid_amount=500.0, status=InvoiceStatus.PAID),
        ]
        patients = [_make_patient("p1"), _make_patient("p2", "Luis Gómez")]

        accounts = compute_receivables(invoices, patients, NOW)

        expected = sum(
            inv.amount - inv.paid_amount
            for inv in invoices
            if inv.status in (InvoiceStatus.PENDING, InvoiceStatus.PARTIALLY_PAID)
        )
        assert sum(a.total_debt for a in accounts) == pytest.approx(expected)
        assert sum(a.total_debt for a in accounts) == pytest.approx(330.0)

    def test_sorted_by_total_debt_descending(self):
        """Patients owing more come first."""
        invoices = [
            _make_invoice("inv-1", "p1", amount=50.0),
            _make_invoice("inv-2", "p2", amount=300.0),
        ]
        patients = [_make_patient("p1"), _make_patient("p2", "Luis Gómez")]

        accounts = compute_receivables(invoices, patients, NOW)
        assert [a.patient_id for a in accounts] == ["p2", "p1"]

    def test_overdue_after_thirty_days(self):
        """Invoices older than 30 days count as overdue; recent ones do not."""
        invoices = [
            _make_invoice("old", "p1", amount=120.0, invoice_date=date(2025, 1, 2)),
            _make_invoice("new", "p1", amount=80.0, invoice_date=date(2025, 3, 1)),
        ]
        accounts = compute_receivables(invoices, [_make_patient()], NOW)

        assert len(accounts) == 1
        assert accounts[0].total_debt == pytest.approx(200.0)
        assert accounts[0].overdue_debt == pytest.approx(120.0)
        assert accounts[0].overdue_debt <= accounts[0].total_debt
        assert accounts[0].next_payment_due == date(2025, 1, 2)

    def test_exactly_thirty_days_is_not_overdue(self):
        """The threshold is strict: an invoice dated exactly 30 days before now is not overdue."""
        invoice_date = (NOW - timedelta(days=30)).date()
        now = datetime.combine(invoice_date, datetime.min.time()) + timedelta(days=30)
        accounts = compute_receivables(
            [_make_invoice(invoice_date=invoice_date)], [_make_patient()], now
        )
        assert accounts[0].overdue_debt == 0

    def test_fully_paid_invoice_excluded(self):
        """An invoice whose paid amount equals its amount never appears."""
        invoices = [
            _make_invoice("inv-1", amount=100.0, paid_amount=100.0, status=InvoiceStatus.PARTIALLY_PAID),
        ]
        accounts = compute_receivables(invoices, [_make_patient()], NOW)
        assert accounts == []

    def test_unknown_patient_skipped(self):
        """Invoices for patients that cannot be resolved are skipped, not fatal."""
        invoices = [
            _make_invoice("inv-1", "p1", amount=100.0),
            _make_invoice("inv-2", "ghost", amount=999.0),
        ]
        accounts = compute_receivables(invoices, [_make_patient()], NOW)
        assert len(accounts) == 1
        assert accounts[0].total_debt == pytest.approx(100.0)

    def test_settled_statuses_ignored(self):
        """Paid and e-invoiced invoices contribute nothing."""
        invoices = [
            _make_invoice("inv-1", status=InvoiceStatus.PAID),
            _make_invoice("inv-2", status=InvoiceStatus.E_INVOICE_SUBMITTED),
        ]
        assert compute_receivables(invoices, [_make_patient()], NOW) == []

    def test_invoice_list_records_remaining_amounts(self):
        invoices = [
            _make_invoice("inv-1", amount=250.0, paid_amount=50.0, status=InvoiceStatus.PARTIALLY_PAID),
        ]
        accounts = compute_receivables(invoices, [_make_patient()], NOW)
        entry = accounts[0].invoices[0]
        assert entry.invoice_id == "inv-1"
        assert entry.amount == pytest.approx(200.0)
        assert entry.status == InvoiceStatus.PARTIALLY_PAID

    def test_idempotent(self):
        """Same inputs and same now give identical output, inputs untouched."""
        invoices = [
            _make_invoice("inv-1", "p1", amount=100.0, invoice_date=date(2024, 12, 1)),
            _make_invoice("inv-2", "p2", amount=40.0),
        ]
        patients = [_make_patient("p1"), _make_patient("p2", "Luis Gómez")]
        snapshot = [inv.model_copy(deep=True) for inv in invoices]

        first = compute_receivables(invoices, patients, NOW)
        second = compute_receivables(invoices, patients, NOW)

        assert first == second
        assert invoices == snapshot

    def test_summary_totals(self):
        invoices = [
            _make_invoice("inv-1", "p1", amount=100.0, invoice_date=date(2024, 12, 1)),
            _make_invoice("inv-2", "p2", amount=40.0),
        ]
        patients = [_make_patient("p1"), _make_patient("p2", "Luis Gómez")]
        totals = summarize_receivables(compute_receivables(invoices, patients, NOW))
        assert totals["total_receivable"] == pytest.approx(140.0)
        assert totals["total_overdue"] == pytest.approx(100.0)
        assert totals["patients_with_debt"] == 2


# ============================================================================
# PAYMENT PLAN TESTS
# ============================================================================


class TestPaymentPlans:
    """Tests for installment plan generation."""

    def test_equal_split_without_interest(self):
        """250 remaining, 50 down, 3 installments at 0% gives 66.67 each."""
        invoice = _make_invoice(amount=250.0)
        plan = create_payment_plan(invoice, 50.0, 3, 0.0, NOW)

        assert isinstance(plan, PaymentPlan)
        assert len(plan.installments) == 3
        for inst in plan.installments:
            assert inst.amount == pytest.approx(200.0 / 3)
        assert sum(i.amount for i in plan.installments) == pytest.approx(200.0)

    def test_flat_interest_applied_once(self):
        """250 remaining, 50 down, 2 installments at 10% gives 110 each."""
        invoice = _make_invoice(amount=250.0)
        plan = create_payment_plan(invoice, 50.0, 2, 10.0, NOW)

        assert isinstance(plan, PaymentPlan)
        assert plan.financed_amount == pytest.approx(200.0)
        assert plan.total_with_interest == pytest.approx(220.0)
        assert [i.amount for i in plan.installments] == [pytest.approx(110.0)] * 2

    def test_uses_remaining_balance(self):
        """Previously paid amounts are excluded from the financed amount."""
        invoice = _make_invoice(amount=300.0, paid_amount=50.0, status=InvoiceStatus.PARTIALLY_PAID)
        plan = create_payment_plan(invoice, 50.0, 2, 0.0, NOW)
        assert plan.financed_amount == pytest.approx(200.0)
        assert plan.invoice_amount == pytest.approx(300.0)

    def test_schedule_every_thirty_days(self):
        """Installment n is due 30*n days after creation, numbered from 1, pending."""
        plan = create_payment_plan(_make_invoice(amount=400.0), 0.0, 4, 0.0, NOW)
        assert [i.number for i in plan.installments] == [1, 2, 3, 4]
        assert [i.due_date for i in plan.installments] == [
            NOW.date() + timedelta(days=30 * n) for n in range(1, 5)
        ]
        assert all(i.status == InstallmentStatus.PENDING for i in plan.installments)
        assert plan.created_at == NOW

    def test_source_invoice_not_mutated(self):
        invoice = _make_invoice(amount=250.0)
        before = invoice.model_copy(deep=True)
        create_payment_plan(invoice, 50.0, 3, 5.0, NOW)
        assert invoice == before

    def test_no_invoice_selected(self):
        """Missing invoice is a validation failure, not an exception."""
        result = create_payment_plan(None, 0.0, 3, 0.0, NOW)
        assert isinstance(result, ValidationResult)
        assert result.check_name == "invoice_required"

    def test_down_payment_covers_balance(self):
        """Zero financeable amount is rejected."""
        result = create_payment_plan(_make_invoice(amount=100.0), 100.0, 3, 0.0, NOW)
        assert isinstance(result, ValidationResult)
        assert result.check_name == "nothing_to_finance"

    def test_down_payment_exceeds_balance(self):
        result = create_payment_plan(_make_invoice(amount=100.0), 150.0, 3, 0.0, NOW)
        assert isinstance(result, ValidationResult)
        assert result.check_name == "down_payment_exceeds_balance"

    @pytest.mark.parametrize(
        "down_payment,count,rate,check",
        [
            (-1.0, 3, 0.0, "negative_down_payment"),
            (0.0, 0, 0.0, "invalid_installment_count"),
            (0.0, 3, -5.0, "negative_interest_rate"),
        ],
    )
    def test_invalid_parameters(self, down_payment, count, rate, check):
        result = create_payment_plan(_make_invoice(), down_payment, count, rate, NOW)
        assert isinstance(result, ValidationResult)
        assert result.check_name == check

    def test_paid_invoice_cannot_be_financed(self):
        invoice = _make_invoice(status=InvoiceStatus.PAID, paid_amount=100.0)
        result = create_payment_plan(invoice, 0.0, 2, 0.0, NOW)
        assert isinstance(result, ValidationResult)
        assert result.check_name == "invoice_not_open"


class TestPlanLifecycle:
    """Tests for recording installment payments and overdue tracking."""

    def _plan(self) -> PaymentPlan:
        return create_payment_plan(_make_invoice(amount=300.0), 0.0, 3, 0.0, NOW)

    def test_record_payment_marks_installment_paid(self):
        plan = self._plan()
        first = plan.installments[0]

        updated = record_installment_payment(plan, first.id, date(2025, 4, 1), PaymentMethod.CASH)

        assert isinstance(updated, PaymentPlan)
        assert updated.installments[0].status == InstallmentStatus.PAID
        assert updated.installments[0].paid_date == date(2025, 4, 1)
        assert updated.installments[0].payment_method == PaymentMethod.CASH
        # Original plan is left as it was
        assert plan.installments[0].status == InstallmentStatus.PENDING

    def test_paying_twice_is_rejected(self):
        plan = self._plan()
        inst_id = plan.installments[0].id
        updated = record_installment_payment(plan, inst_id, date(2025, 4, 1))
        again = record_installment_payment(updated, inst_id, date(2025, 4, 2))
        assert isinstance(again, ValidationResult)
        assert again.status == ValidationStatus.WARNING
        assert again.severity == ValidationSeverity.LOW

    def test_unknown_installment(self):
        result = record_installment_payment(self._plan(), "nope")
        assert isinstance(result, ValidationResult)
        assert result.check_name == "installment_not_found"
        assert result.status == ValidationStatus.ERROR
        assert result.severity == ValidationSeverity.HIGH

    def test_refresh_flags_overdue(self):
        plan = self._plan()
        later = plan.installments[1].due_date + timedelta(days=1)
        refreshed = refresh_installment_statuses(plan, later)
        assert [i.status for i in refreshed.installments] == [
            InstallmentStatus.OVERDUE,
            InstallmentStatus.OVERDUE,
            InstallmentStatus.PENDING,
        ]

    def test_refresh_leaves_paid_installments(self):
        plan = self._plan()
        paid = record_installment_payment(plan, plan.installments[0].id, date(2025, 4, 1))
        refreshed = refresh_installment_statuses(paid, date(2026, 1, 1))
        assert refreshed.installments[0].status == InstallmentStatus.PAID

    def test_progress(self):
        plan = self._plan()
        paid = record_installment_payment(plan, plan.installments[0].id, date(2025, 4, 1))
        progress = plan_progress(paid)
        assert progress["paid_installments"] == 1
        assert progress["total_installments"] == 3
        assert progress["outstanding_amount"] == pytest.approx(200.0)


# ============================================================================
# COMMISSION TESTS
# ============================================================================


class TestCommissions:
    """Tests for provider commission calculation."""

    def test_default_rate_is_thirty_percent(self):
        """A provider without a rate earns 30% of a 100 line."""
        invoice = _make_invoice(amount=100.0, status=InvoiceStatus.PAID, paid_amount=100.0)
        commissions = compute_commissions(
            "2025-03", [_make_provider()], [invoice], [], [_make_patient()]
        )
        assert len(commissions) == 1
        entry = commissions[0].services[0]
        assert entry.commission_rate == pytest.approx(0.30)
        assert entry.amount == pytest.approx(30.0)
        assert commissions[0].total_commission == pytest.approx(30.0)
        assert commissions[0].total_paid == pytest.approx(30.0)
        assert commissions[0].base_salary == 0
        assert commissions[0].status == CommissionStatus.PENDING

    def test_explicit_rate(self):
        invoice = _make_invoice(amount=200.0, status=InvoiceStatus.PAID, paid_amount=200.0)
        commissions = compute_commissions(
            "2025-03", [_make_provider(commission_rate=0.35)], [invoice], [], [_make_patient()]
        )
        assert commissions[0].total_commission == pytest.approx(70.0)

    def test_zero_rate_falls_back_to_default(self):
        """A stored rate of 0 is treated as unset and pays the 30% default."""
        invoice = _make_invoice(amount=100.0, status=InvoiceStatus.PAID, paid_amount=100.0)
        commissions = compute_commissions(
            "2025-03", [_make_provider(commission_rate=0.0)], [invoice], [], [_make_patient()]
        )
        assert commissions[0].services[0].commission_rate == pytest.approx(0.30)
        assert commissions[0].total_commission == pytest.approx(30.0)

    def test_pending_invoices_excluded(self):
        """Unpaid invoices in the period contribute nothing."""
        invoices = [
            _make_invoice("inv-1", status=InvoiceStatus.PENDING),
            _make_invoice("inv-2", status=InvoiceStatus.PARTIALLY_PAID, paid_amount=10.0),
        ]
        commissions = compute_commissions(
            "2025-03", [_make_provider()], invoices, [], [_make_patient()]
        )
        assert commissions[0].total_commission == 0
        assert commissions[0].services == []

    def test_e_invoiced_invoices_qualify(self):
        invoice = _make_invoice(status=InvoiceStatus.E_INVOICE_SUBMITTED)
        commissions = compute_commissions(
            "2025-03", [_make_provider()], [invoice], [], [_make_patient()]
        )
        assert commissions[0].total_commission == pytest.approx(30.0)

    def test_other_periods_excluded(self):
        invoice = _make_invoice(status=InvoiceStatus.PAID, paid_amount=100.0, invoice_date=date(2025, 2, 28))
        commissions = compute_commissions(
            "2025-03", [_make_provider()], [invoice], [], [_make_patient()]
        )
        assert commissions[0].total_commission == 0

    def test_only_dentists_and_admins(self):
        providers = [
            _make_provider("d1", UserRole.DENTIST),
            _make_provider("a1", UserRole.ADMIN),
            _make_provider("s1", UserRole.STUDENT),
            _make_provider("r1", UserRole.RECEPTIONIST),
        ]
        invoice = _make_invoice(status=InvoiceStatus.PAID, paid_amount=100.0)
        commissions = compute_commissions("2025-03", providers, [invoice], [], [_make_patient()])
        assert [c.provider_id for c in commissions] == ["d1", "a1"]

    def test_every_provider_credited_by_default(self):
        """Without performing-provider data every qualifying line counts for everyone."""
        providers = [_make_provider("d1"), _make_provider("d2", commission_rate=0.20)]
        invoice = _make_invoice(
            status=InvoiceStatus.PAID,
            paid_amount=150.0,
            amount=150.0,
            items=[
                InvoiceLineItem(description="Consulta", price=50.0, service_id="s1"),
                InvoiceLineItem(description="Limpieza", price=100.0, service_id="s2"),
            ],
        )
        commissions = compute_commissions("2025-03", providers, [invoice], [], [_make_patient()])
        assert commissions[0].total_commission == pytest.approx(45.0)
        assert commissions[1].total_commission == pytest.approx(30.0)

    def test_performing_provider_attribution(self):
        """Lines are only credited to the provider who performed them."""
        providers = [_make_provider("d1"), _make_provider("d2")]
        invoice = _make_invoice(
            status=InvoiceStatus.PAID,
            paid_amount=150.0,
            amount=150.0,
            items=[
                InvoiceLineItem(description="Consulta", price=50.0, provider_id="d1"),
                InvoiceLineItem(description="Limpieza", price=100.0, provider_id="d2"),
                InvoiceLineItem(description="Sin asignar", price=70.0),
            ],
        )
        commissions = compute_commissions(
            "2025-03",
            providers,
            [invoice],
            [],
            [_make_patient()],
            attribution=AttributionMode.PERFORMING_PROVIDER,
        )
        assert commissions[0].total_commission == pytest.approx(15.0)
        assert commissions[1].total_commission == pytest.approx(30.0)

    def test_service_and_patient_labels(self):
        """Known services use catalog names; unknown references fall back gracefully."""
        services = [ServiceItem(id="s1", name="Consulta General", base_price=50.0)]
        invoice = _make_invoice(
            patient_id="ghost",
            status=InvoiceStatus.PAID,
            amount=150.0,
            paid_amount=150.0,
            items=[
                InvoiceLineItem(description="Consulta", price=50.0, service_id="s1"),
                InvoiceLineItem(description="Extra", price=100.0),
            ],
        )
        commissions = compute_commissions("2025-03", [_make_provider()], [invoice], services, [])
        entries = commissions[0].services
        assert entries[0].service_name == "Consulta General"
        assert entries[1].service_name == "Extra"
        assert entries[1].service_id == "unknown"
        assert entries[0].patient_name == "Unknown"

    def test_idempotent(self):
        invoice = _make_invoice(status=InvoiceStatus.PAID, paid_amount=100.0)
        args = ("2025-03", [_make_provider()], [invoice], [], [_make_patient()])
        assert compute_commissions(*args) == compute_commissions(*args)

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            compute_commissions("March 2025", [_make_provider()], [], [], [])
        with pytest.raises(ValueError):
            parse_period("2025-13")

    def test_available_periods_cross_year(self):
        periods = available_periods(date(2025, 2, 10), months=4)
        assert periods == ["2025-02", "2025-01", "2024-12", "2024-11"]

    def test_current_period(self):
        assert current_period(date(2025, 3, 31)) == "2025-03"
        assert current_period(datetime(2024, 11, 1, 23, 59)) == "2024-11"

    def test_status_moves_forward(self):
        commission = compute_commissions("2025-03", [_make_provider()], [], [], [])[0]
        processing = update_commission_status(commission, CommissionStatus.PROCESSING)
        paid = update_commission_status(processing, CommissionStatus.PAID, date(2025, 4, 5))
        assert paid.status == CommissionStatus.PAID
        assert paid.paid_date == date(2025, 4, 5)

        back = update_commission_status(paid, CommissionStatus.PENDING)
        assert isinstance(back, ValidationResult)

    def test_csv_export(self):
        invoice = _make_invoice(status=InvoiceStatus.PAID, paid_amount=100.0)
        commission = compute_commissions(
            "2025-03", [_make_provider()], [invoice], [], [_make_patient()]
        )[0]
        content = commission_to_csv(commission, "Dr. Carlos Ruiz")
        lines = content.splitlines()
        assert lines[1] == "Provider: Dr. Carlos Ruiz"
        assert lines[5] == "Date,Patient,Service,Base Price,Rate %,Commission"
        assert lines[6] == "2025-03-10,Ana Torres,Consulta,100.00,30%,30.00"
        assert commission_csv_filename(commission, "Dr. Carlos Ruiz") == "commissions_Dr._Carlos_Ruiz_2025-03.csv"


# ============================================================================
# INVOICE TESTS
# ============================================================================


class TestInvoices:
    """Tests for invoice totals and payment recording."""

    SERVICES = [
        ServiceItem(id="s1", name="Consulta", base_price=50.0),
        ServiceItem(id="s2", name="Limpieza", base_price=100.0),
    ]

    def test_total_is_subtotal_minus_discount(self):
        invoice = build_invoice(
            "p1",
            [DraftLine(service_id="s1", quantity=2), DraftLine(service_id="s2")],
            self.SERVICES,
            discount=20.0,
            today=date(2025, 3, 1),
        )
        assert isinstance(invoice, Invoice)
        assert invoice.amount == pytest.approx(180.0)
        assert invoice.items[0].price == pytest.approx(100.0)
        assert invoice.items[0].description == "Consulta"
        assert invoice.status == InvoiceStatus.PENDING
        assert invoice.date == date(2025, 3, 1)

    def test_patient_required(self):
        result = build_invoice(None, [DraftLine(service_id="s1")], self.SERVICES)
        assert isinstance(result, ValidationResult)
        assert result.check_name == "patient_required"

    def test_items_required(self):
        result = build_invoice("p1", [], self.SERVICES)
        assert isinstance(result, ValidationResult)
        assert result.check_name == "items_required"

    def test_discount_cannot_exceed_subtotal(self):
        result = build_invoice("p1", [DraftLine(service_id="s1")], self.SERVICES, discount=80.0)
        assert isinstance(result, ValidationResult)
        assert result.check_name == "discount_exceeds_subtotal"

    def test_partial_then_full_payment(self):
        invoice = _make_invoice(amount=250.0)
        partial = record_invoice_payment(invoice, 100.0, PaymentMethod.CARD)
        assert partial.status == InvoiceStatus.PARTIALLY_PAID
        assert partial.paid_amount == pytest.approx(100.0)

        full = record_invoice_payment(partial, 150.0)
        assert full.status == InvoiceStatus.PAID
        assert full.paid_amount == full.amount
        assert full.payment_method == PaymentMethod.CARD

    def test_overpayment_rejected(self):
        result = record_invoice_payment(_make_invoice(amount=100.0), 150.0)
        assert isinstance(result, ValidationResult)
        assert result.check_name == "overpayment"

    def test_paid_amount_invariant(self):
        with pytest.raises(ValueError):
            _make_invoice(amount=100.0, paid_amount=120.0)


# ============================================================================
# SUMMARY TESTS
# ============================================================================


def test_summarize_billing():
    """Dashboard totals combine receivables and the period's commissions."""
    invoices = [
        _make_invoice("inv-1", amount=100.0, status=InvoiceStatus.PAID, paid_amount=100.0),
        _make_invoice("inv-2", amount=60.0, invoice_date=date(2024, 12, 20)),
    ]
    summary = summarize_billing(
        "2025-03",
        [_make_provider()],
        invoices,
        [],
        [_make_patient()],
        now=NOW,
    )
    assert summary.total_receivable == pytest.approx(60.0)
    assert summary.total_overdue == pytest.approx(60.0)
    assert summary.patients_with_debt == 1
    assert summary.total_commissions == pytest.approx(30.0)
