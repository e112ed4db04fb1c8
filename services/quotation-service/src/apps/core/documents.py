# services/quotation-service/src/apps/core/documents.py
"""
Quote Documents

PDF rendering of quotes, used by the notification tasks.
"""

import io
import logging
from decimal import Decimal
from xml.sax.saxutils import escape

from django.conf import settings
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from shared.common.utils import format_currency

logger = logging.getLogger(__name__)


def render_quote_pdf(quote) -> bytes:
    """Render a quote with its line items, total and deposit as a PDF."""
    currency = settings.QUOTATION_CURRENCY

    output = io.BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=letter,
        rightMargin=0.75*inch,
        leftMargin=0.75*inch,
        topMargin=0.75*inch,
        bottomMargin=0.75*inch,
        title=f"Quote {quote.number}",
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'QuoteTitle',
        parent=styles['Heading1'],
        fontSize=16,
        spaceAfter=12
    )

    elements = [
        Paragraph(f"Quote {quote.number}", title_style),
        Paragraph(f"Issued: {timezone.now():%Y-%m-%d}", styles['Normal']),
        Spacer(1, 12),
    ]

    details = [
        ['Client', quote.contact_name],
        ['Space', f"{quote.space.name} ({quote.configuration.name})"],
        ['Date', f"{quote.date:%Y-%m-%d}"],
        ['Start', f"{quote.start_time:%H:%M}"],
        ['Duration', f"{quote.duration_hours}h"],
        ['Attendees', str(quote.attendees)],
    ]
    if quote.event_type:
        details.append(['Event', quote.event_type])

    details_table = Table(details, colWidths=[1.5*inch, 5*inch])
    details_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
    ]))
    elements.extend([details_table, Spacer(1, 18)])

    # Line items
    rows = [['Description', 'Qty', 'Unit price', 'Total']]
    for item in quote.line_items:
        rows.append([
            item['description'],
            str(item['quantity']),
            format_currency(Decimal(item['unit_price']), currency),
            format_currency(Decimal(item['line_total']), currency),
        ])
    rows.append(['', '', 'Total', format_currency(quote.total, currency)])
    rows.append(['', '', 'Deposit', format_currency(quote.deposit_amount, currency)])

    items_table = Table(rows, colWidths=[3.5*inch, 0.6*inch, 1.2*inch, 1.2*inch], repeatRows=1)
    items_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#4472C4')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
        ('GRID', (0, 0), (-1, -3), 0.5, colors.black),
        ('FONTNAME', (2, -2), (-1, -1), 'Helvetica-Bold'),
        ('ROWBACKGROUNDS', (0, 1), (-1, -3), [colors.white, colors.HexColor('#F2F2F2')]),
    ]))
    elements.append(items_table)

    if quote.observations:
        elements.extend([
            Spacer(1, 18),
            Paragraph('Observations', styles['Heading3']),
            Paragraph(escape(quote.observations).replace('\n', '<br/>'), styles['Normal']),
        ])

    doc.build(elements)
    content = output.getvalue()
    logger.debug(f"Rendered quote {quote.number} PDF ({len(content)} bytes)")
    return content
