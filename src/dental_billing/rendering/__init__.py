"""PDF rendering of billing documents."""

from .documents import render_invoice_pdf, render_payment_plan_pdf

__all__ = ["render_invoice_pdf", "render_payment_plan_pdf"]
