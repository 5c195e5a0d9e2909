import csv
from io import StringIO, BytesIO
from datetime import datetime
from decimal import Decimal

from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib import colors
from reportlab.lib.units import inch

HEADER = ["Source", "Received", "Sent", "Cash in Reception", "Transactions"]


def summary_rows(report: dict) -> list[list[str]]:
    """One row per source card plus a total row, amounts formatted to 2 places."""
    rows = []
    received = sent = Decimal("0")
    count = 0
    for source, card in report["cards"].items():
        s = card["summary"]
        n = card["pagination"]["totalTransactions"]
        rows.append([source, f"{s['totalReceived']:.2f}", f"{s['totalSent']:.2f}", f"{s['cashInReception']:.2f}", str(n)])
        received += s["totalReceived"]
        sent += s["totalSent"]
        count += n
    rows.append(["TOTAL", f"{received:.2f}", f"{sent:.2f}", f"{received - sent:.2f}", str(count)])
    return rows


def generate_csv_report(report: dict) -> str:
    """Generates a CSV summary of a cash report."""
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(HEADER)
    writer.writerows(summary_rows(report))
    return output.getvalue()


def generate_pdf_report(report: dict, app_name: str, generated_at: datetime | None = None) -> bytes:
    """Generates a PDF summary of a cash report using ReportLab."""
    generated_at = generated_at or datetime.now()
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, rightMargin=0.5*inch, leftMargin=0.5*inch, topMargin=0.5*inch, bottomMargin=0.5*inch)
    styles = getSampleStyleSheet()
    elements = []

    elements.append(Paragraph(f"Cash at Reception - {app_name}", styles['h1']))
    subtitle = f"Period: {report['filterApplied']} (generated {generated_at:%Y-%m-%d %H:%M})"
    elements.append(Paragraph(subtitle, styles['h2']))
    elements.append(Spacer(1, 0.25*inch))

    data = [HEADER] + summary_rows(report)
    table = Table(data, colWidths=[1.8*inch, 1.2*inch, 1.2*inch, 1.5*inch, 1.1*inch])
    style = TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.teal),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 12),
        ('BACKGROUND', (0, 1), (-1, -1), colors.beige),
        ('GRID', (0,0), (-1,-1), 1, colors.black)
    ])
    table.setStyle(style)
    elements.append(table)

    doc.build(elements)
    return buffer.getvalue()
