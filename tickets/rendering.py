"""
Ticket PDF rendering.

Pure: takes a :class:`TicketData` and returns the PDF bytes.  No database,
no storage, no clock.  The QR code encodes the ticket's verification URL
so a scanner lands on the verify endpoint rather than reading a bare code.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from io import BytesIO

from reportlab.graphics import renderPDF
from reportlab.graphics.barcode import qr
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.lib.pagesizes import A5, landscape
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

DATE_FORMAT = "%d %b %Y"
TIME_FORMAT = "%H:%M"
QR_SIZE = 50 * mm


@dataclass(frozen=True)
class TicketData:
    code: str
    event_name: str
    location: str
    starts_at: datetime
    ends_at: datetime | None
    buyer_email: str
    tier_name: str
    unit_amount: int
    currency: str
    order_id: str
    verification_url: str

    @property
    def price_label(self) -> str:
        return "FREE" if not self.unit_amount else f"{self.unit_amount} {self.currency}"

    @property
    def schedule_lines(self) -> list[str]:
        start = self.starts_at
        lines = [f"{start.strftime(DATE_FORMAT)}  {start.strftime(TIME_FORMAT)}"]
        if self.ends_at is not None:
            end = self.ends_at
            if end.date() == start.date():
                lines[0] += f" - {end.strftime(TIME_FORMAT)}"
            else:
                lines.append(f"until {end.strftime(DATE_FORMAT)}  {end.strftime(TIME_FORMAT)}")
        return lines


def build_ticket_code(tier_name: str, sequence: int) -> str:
    """Human-readable code of the ``sequence``-th (1-based) ticket of a tier."""
    return f"{tier_name}-{sequence}"


def _qr_drawing(value: str, size: float) -> Drawing:
    widget = qr.QrCodeWidget(value)
    x1, y1, x2, y2 = widget.getBounds()
    width, height = x2 - x1, y2 - y1
    drawing = Drawing(size, size, transform=[size / width, 0, 0, size / height, 0, 0])
    drawing.add(widget)
    return drawing


def render_ticket_pdf(ticket: TicketData) -> bytes:
    buffer = BytesIO()
    page_width, page_height = landscape(A5)
    pdf = canvas.Canvas(buffer, pagesize=(page_width, page_height), invariant=1)
    pdf.setTitle(f"{ticket.event_name} - {ticket.code}")

    margin = 12 * mm
    pdf.setStrokeColor(colors.HexColor("#1f2937"))
    pdf.setLineWidth(1.5)
    pdf.roundRect(margin / 2, margin / 2, page_width - margin, page_height - margin, 6 * mm)

    y = page_height - margin - 6 * mm
    pdf.setFont("Helvetica-Bold", 20)
    pdf.drawString(margin, y, ticket.event_name[:48])

    y -= 10 * mm
    pdf.setFont("Helvetica", 11)
    if ticket.location:
        pdf.drawString(margin, y, ticket.location[:70])
        y -= 6 * mm
    for line in ticket.schedule_lines:
        pdf.drawString(margin, y, line)
        y -= 6 * mm

    y -= 4 * mm
    rows = [
        ("Ticket", ticket.code),
        ("Tier", ticket.tier_name),
        ("Price", ticket.price_label),
        ("Holder", ticket.buyer_email),
        ("Order", ticket.order_id),
    ]
    for label, value in rows:
        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(margin, y, f"{label}:")
        pdf.setFont("Helvetica", 10)
        pdf.drawString(margin + 20 * mm, y, str(value))
        y -= 6 * mm

    qr_x = page_width - margin - QR_SIZE
    qr_y = (page_height - QR_SIZE) / 2
    renderPDF.draw(_qr_drawing(ticket.verification_url, QR_SIZE), pdf, qr_x, qr_y)
    pdf.setFont("Helvetica", 8)
    pdf.drawCentredString(qr_x + QR_SIZE / 2, qr_y - 4 * mm, "Scan at the entrance")

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
