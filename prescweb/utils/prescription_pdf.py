# prescweb/utils/prescription_pdf.py
"""
Render a stored prescription as a printable A4 PDF using reportlab.

Layout follows the paper pad: doctor/clinic header, patient strip,
left column of clinical notes, then the Rx list (medications and advice
lines in the order the doctor arranged them), follow-up and signature.
An optional pad design supplies header/footer lines.
"""

from io import BytesIO
from typing import Any, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from prescweb.schemas.prescription import AdviceItem, PrescriptionRecord

HISTORY_FLAGS = (("htn", "HTN"), ("dm", "DM"), ("ihd", "IHD"), ("ba", "BA"), ("ckd", "CKD"))


def _p(text: str, style: ParagraphStyle) -> Paragraph:
    return Paragraph(escape(text).replace("\n", "<br/>"), style)


def _history_line(record: PrescriptionRecord) -> str:
    history = record.history_of
    parts = [label for attr, label in HISTORY_FLAGS if getattr(history, attr)]
    if history.others:
        parts.append(history.others)
    return ", ".join(parts)


def _examination_line(record: PrescriptionRecord) -> str:
    oe = record.on_examination
    parts = []
    if oe.bp_sys or oe.bp_dia:
        parts.append(f"BP: {oe.bp_sys or '-'}/{oe.bp_dia or '-'} mmHg")
    if oe.pulse:
        parts.append(f"Pulse: {oe.pulse} bpm")
    if oe.temp:
        parts.append(f"Temp: {oe.temp}")
    if oe.spo2:
        parts.append(f"SpO2: {oe.spo2}%")
    if oe.rr:
        parts.append(f"RR: {oe.rr}/min")
    if oe.others:
        parts.append(oe.others)
    return ", ".join(parts)


def generate_prescription_pdf(
    record: PrescriptionRecord,
    doctor_name: str = "Doctor",
    clinic_name: str = "Clinic",
    design_data: Optional[dict[str, Any]] = None,
) -> BytesIO:
    """
    Generate a PDF for one prescription.
    Returns a BytesIO buffer positioned at the start.
    """
    design = design_data or {}
    buffer = BytesIO()

    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=20 * mm,
        leftMargin=20 * mm,
        topMargin=15 * mm,
        bottomMargin=10 * mm,
        title=f"Prescription {record.prescription_no}",
    )

    elements = []

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "RxTitle",
        parent=styles["Heading1"],
        fontSize=20,
        textColor=colors.black,
        spaceAfter=4,
        fontName="Helvetica-Bold",
    )
    heading_style = ParagraphStyle(
        "RxHeading",
        parent=styles["Heading2"],
        fontSize=12,
        textColor=colors.black,
        spaceAfter=4,
        fontName="Helvetica-Bold",
    )
    normal_style = ParagraphStyle(
        "RxNormal",
        parent=styles["Normal"],
        fontSize=10,
        textColor=colors.black,
        spaceAfter=4,
    )
    small_style = ParagraphStyle(
        "RxSmall",
        parent=styles["Normal"],
        fontSize=8,
        textColor=colors.black,
        spaceAfter=2,
    )

    # Header
    if doctor_name and not doctor_name.startswith("Dr."):
        doctor_name = f"Dr. {doctor_name}"
    elements.append(_p(design.get("headerTitle") or doctor_name, title_style))
    elements.append(_p(clinic_name, normal_style))
    for line in design.get("headerLines") or []:
        elements.append(_p(str(line), small_style))
    elements.append(Spacer(1, 4 * mm))

    # Patient strip
    patient = record.patient_details
    date_str = patient.date or record.created_at.strftime("%d/%m/%Y")
    patient_table = Table(
        [
            [
                f"Name: {patient.name}",
                f"Age: {patient.age}",
                f"Gender: {patient.gender or '-'}",
                f"Reg No: {patient.reg_no}",
                f"Date: {date_str}",
            ]
        ],
        colWidths=[55 * mm, 25 * mm, 30 * mm, 30 * mm, 30 * mm],
    )
    patient_table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("LINEBELOW", (0, 0), (-1, -1), 1, colors.black),
                ("LINEABOVE", (0, 0), (-1, -1), 1, colors.black),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ("TOPPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    elements.append(patient_table)
    elements.append(Spacer(1, 4 * mm))

    # Clinical notes
    sections = [
        ("Chief Complaints", record.chief_complaints),
        ("History Of", _history_line(record)),
        ("Drug History", record.drug_history),
        ("On Examination", _examination_line(record)),
        ("Investigation", record.investigation),
        ("Diagnosis", record.diagnosis),
    ]
    for label, value in sections:
        if value:
            elements.append(_p(f"{label}:", heading_style))
            elements.append(_p(value, normal_style))

    # Rx
    elements.append(Spacer(1, 3 * mm))
    elements.append(_p("Rx", title_style))
    rx_rows = []
    for number, item in enumerate(record.prescription_items, start=1):
        if isinstance(item, AdviceItem):
            rx_rows.append([f"{number}.", _p(item.advice, normal_style), ""])
            continue
        detail = " | ".join(part for part in (item.dosage, item.timing, item.duration) if part)
        if item.instructions:
            detail = f"{detail}\n{item.instructions}" if detail else item.instructions
        rx_rows.append(
            [
                f"{number}.",
                _p(f"{item.form}. {item.brand} {item.strength}".strip(" ."), heading_style),
                _p(detail, normal_style),
            ]
        )

    if rx_rows:
        rx_table = Table(rx_rows, colWidths=[10 * mm, 80 * mm, 80 * mm])
        rx_table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("LINEBELOW", (0, 0), (-1, -1), 0.25, colors.grey),
                    ("TOPPADDING", (0, 0), (-1, -1), 4),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(rx_table)
        elements.append(Spacer(1, 4 * mm))

    if record.advice:
        elements.append(_p("Advice:", heading_style))
        elements.append(_p(record.advice, normal_style))
    if record.followup:
        elements.append(_p("Follow-up:", heading_style))
        elements.append(_p(record.followup, normal_style))

    # Footer
    elements.append(Spacer(1, 10 * mm))
    elements.append(_p("Signature: _________________", normal_style))
    elements.append(_p(doctor_name, normal_style))
    if design.get("footerText"):
        elements.append(Spacer(1, 4 * mm))
        elements.append(_p(str(design["footerText"]), small_style))

    doc.build(elements)
    buffer.seek(0)
    return buffer
