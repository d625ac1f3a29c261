"""Printable invoice and payment plan documents."""

import logging
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..schemas import Invoice, Patient, PaymentPlan

logger = logging.getLogger(__name__)

styles = getSampleStyleSheet()
styles.add(ParagraphStyle(name="SubHeader", parent=styles["Normal"], fontSize=11, spaceAfter=4, textColor=colors.HexColor("#336699")))
styles.add(ParagraphStyle(name="Small", parent=styles["Normal"], fontSize=9))
styles.add(ParagraphStyle(name="TitleCenter", parent=styles["Title"], alignment=TA_CENTER))


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _table(rows, col_widths=None, header=True, amount_cols=(), total_row=False):
    """Grid table; ``amount_cols`` are right-aligned, ``total_row`` bolds the last row."""
    t = Table(rows, colWidths=col_widths, hAlign="LEFT")
    cmds = [
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    cmds += [("ALIGN", (col, 0), (col, -1), "RIGHT") for col in amount_cols]
    if header:
        cmds += [
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#0B5563")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ]
    if total_row:
        cmds += [
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ("LINEABOVE", (0, -1), (-1, -1), 1, colors.black),
        ]
    t.setStyle(TableStyle(cmds))
    return t


def _patient_block(patient: Patient | None) -> list:
    if patient is None:
        return [Paragraph("Patient: Unknown", styles["Small"])]
    info = [
        ["Patient:", patient.name, "ID:", patient.dni or ""],
        ["Phone:", patient.phone or "", "Email:", patient.email or ""],
    ]
    return [_table(info, col_widths=[0.9*inch, 2.4*inch, 0.7*inch, 2.4*inch], header=False)]


def render_invoice_pdf(invoice: Invoice, patient: Patient | None, path: str | Path) -> Path:
    """Write a printable invoice to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    doc = SimpleDocTemplate(str(path), pagesize=letter)
    story = []

    story.append(Paragraph(f"INVOICE #{invoice.id}", styles["TitleCenter"]))
    story.append(Paragraph(f"Date: {invoice.date.isoformat()}", styles["Small"]))
    if invoice.electronic_invoice_code:
        story.append(Paragraph(f"Electronic invoice: {invoice.electronic_invoice_code}", styles["Small"]))
    story.append(Spacer(1, 12))
    story.extend(_patient_block(patient))
    story.append(Spacer(1, 12))

    story.append(Paragraph("Services", styles["SubHeader"]))
    lines = [["Description", "Qty", "Unit Price", "Total"]]
    for item in invoice.items:
        unit = item.price / item.quantity if item.quantity else item.price
        lines.append([item.description, str(item.quantity), _money(unit), _money(item.price)])
    story.append(_table(lines, col_widths=[3.4*inch, 0.6*inch, 1.1*inch, 1.1*inch], amount_cols=(1, 2, 3)))
    story.append(Spacer(1, 12))

    subtotal = sum(item.price for item in invoice.items)
    totals = [
        ["Subtotal:", _money(subtotal)],
        ["Discount:", f"-{_money(invoice.discount)}"],
        ["Total:", _money(invoice.amount)],
        ["Paid:", _money(invoice.paid_amount)],
        ["Balance Due:", _money(invoice.remaining)],
    ]
    story.append(
        _table(totals, col_widths=[2*inch, 1.5*inch], header=False, amount_cols=(1,), total_row=True)
    )

    doc.build(story)
    logger.debug("Rendered invoice %s to %s", invoice.id, path)
    return path


def render_payment_plan_pdf(plan: PaymentPlan, patient: Patient | None, path: str | Path) -> Path:
    """Write a payment plan schedule to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    doc = SimpleDocTemplate(str(path), pagesize=letter)
    story = []

    story.append(Paragraph(f"Payment Plan - {len(plan.installments)} Installments", styles["TitleCenter"]))
    story.append(Paragraph(f"Invoice #{plan.invoice_id}", styles["Small"]))
    story.append(Spacer(1, 12))
    story.extend(_patient_block(patient))
    story.append(Spacer(1, 12))

    terms = [
        ["Invoice amount:", _money(plan.invoice_amount)],
        ["Down payment:", _money(plan.down_payment)],
        ["Amount financed:", _money(plan.financed_amount)],
        [f"Interest ({plan.interest_rate:g}%):", _money(plan.total_with_interest - plan.financed_amount)],
        ["Total to pay:", _money(plan.total_with_interest)],
    ]
    story.append(
        _table(terms, col_widths=[2*inch, 1.5*inch], header=False, amount_cols=(1,), total_row=True)
    )
    story.append(Spacer(1, 12))

    story.append(Paragraph("Schedule", styles["SubHeader"]))
    schedule = [["#", "Due Date", "Amount", "Status", "Paid On"]]
    for inst in plan.installments:
        schedule.append(
            [
                str(inst.number),
                inst.due_date.isoformat(),
                _money(inst.amount),
                inst.status.value,
                inst.paid_date.isoformat() if inst.paid_date else "",
            ]
        )
    story.append(_table(schedule, col_widths=[0.5*inch, 1.2*inch, 1.1*inch, 1*inch, 1.2*inch], amount_cols=(2,)))

    doc.build(story)
    logger.debug("Rendered payment plan %s to %s", plan.id, path)
    return path
