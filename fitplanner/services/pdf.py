import io
from typing import Any, List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .pipeline import PlanResult

_TABLE_STYLE = TableStyle([
    ("GRID", (0, 0), (-1, -1), 0.4, colors.grey),
    ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
])


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.1f}"


def build_plan_pdf(result: PlanResult, app_name: str) -> bytes:
    """Render a printable one-page summary of a plan."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=letter, title=f"{app_name} Plan")
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name="Small", fontSize=9, leading=11))
    t = result.targets
    story: List[Any] = [Paragraph(f"<b>{app_name}</b>", styles["Title"])]
    if result.profile.name:
        story.append(Paragraph(f"Plan for {escape(result.profile.name)}", styles["Normal"]))
    story.append(Paragraph(
        f"BMR: {t.bmr} kcal • TDEE: {t.tdee} kcal • Target: {t.target_calories} kcal/day "
        f"(daily change ~ {t.daily_change} kcal)", styles["Normal"]))
    story.append(Spacer(1, 0.2 * inch))

    plan = result.meal_plan
    story.append(Paragraph(f"<b>Meal Plan</b> ({len(plan.meals)} meals)", styles["Heading2"]))
    rows = [["Meal", "kcal", "P", "C", "F"]]
    for m in plan.meals:
        rows.append([m.name, _fmt(m.calories), _fmt(m.protein), _fmt(m.carbs), _fmt(m.fat)])
    tot = plan.totals
    rows.append(["Total", _fmt(tot.calories), _fmt(tot.protein), _fmt(tot.carbs), _fmt(tot.fat)])
    table = Table(rows, hAlign="LEFT", colWidths=[3.7 * inch, 0.8 * inch, 0.6 * inch, 0.6 * inch, 0.6 * inch])
    table.setStyle(_TABLE_STYLE)
    story.append(table)
    story.append(Spacer(1, 0.2 * inch))

    sel = result.workouts
    story.append(Paragraph(f"<b>Workout Plan</b> ({sel.goal}, {sel.level})", styles["Heading2"]))
    if sel.is_empty:
        story.append(Paragraph("No workouts found for this goal/level.", styles["Normal"]))
    for w in sel.plans:
        story.append(Paragraph(f"<b>{escape(w.title)}</b> • Goal: {w.goal} | Level: {w.level}", styles["Normal"]))
        lines = [escape(f"• {b.name}  {b.summary}" + (f" (Tip: {b.tip})" if b.tip else "")) for b in w.blocks]
        story.append(Paragraph("<br/>".join(lines) or "No exercises listed.", styles["Small"]))
        story.append(Spacer(1, 0.1 * inch))

    doc.build(story)
    return buf.getvalue()
