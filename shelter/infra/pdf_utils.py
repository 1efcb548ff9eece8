import io
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet


def generate_pdf_for_month(report):
    """Generate the monthly meal report PDF: one row per PDF category plus the grand total.

    `report` is the dict returned by monthly_meal_report(); only its 'title' and
    'pdf' view are rendered.
    """
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20,
        title=f"Meal Report - {report['title']}",
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"Meal Report – {report['title']}", styles["Title"]),
        Spacer(1, 16),
    ]

    pdf_view = report["pdf"]
    data = [["Category", "Meals"]]
    for row in pdf_view["rows"]:
        data.append([row["label"], f"{row['count']:,}"])
    data.append(["Total", f"{pdf_view['total']:,}"])

    table = Table(data, repeatRows=1, colWidths=[260, 120])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#4CAF50")),
        ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
        ("ALIGN", (1,0), (1,-1), "RIGHT"),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTNAME", (0,-1), (-1,-1), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 12),
        ("BOTTOMPADDING", (0,0), (-1,0), 10),
        ("LINEABOVE", (0,-1), (-1,-1), 1, colors.black),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
    ]))

    elements.append(table)
    doc.build(elements)
    return buf.getvalue()
