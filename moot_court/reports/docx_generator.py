"""DOCX export of rendered judgments.

Uses python-docx to create right-to-left Word documents with:
- Centered deed header
- Bold section headings
- Optional decision summary table
- Optional session transcript appendix
"""

from pathlib import Path
from typing import Optional, Sequence

from docx import Document
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt

from ..models.decision import (
    ADMISSIBLE,
    INADMISSIBLE,
    JURISDICTION_COMPETENT,
    JURISDICTION_INCOMPETENT,
    DecisionRecord,
)
from ..models.message import Message
from ..utils.arabic import format_arabic_amount

ARABIC_FONT = "Traditional Arabic"

# Lines from the first section heading onward form the deed body
BODY_START = "(الوقائع)"


def _set_rtl(paragraph) -> None:
    """Mark a paragraph as right-to-left."""
    p_pr = paragraph._p.get_or_add_pPr()
    bidi = OxmlElement("w:bidi")
    bidi.set(qn("w:val"), "1")
    p_pr.append(bidi)


def _is_section_heading(line: str) -> bool:
    return line.startswith("(") and line.endswith(")") and len(line) < 40


class JudgmentDocxGenerator:
    """Generator for judgment deeds in DOCX format."""

    def __init__(self):
        """Initialize with a new document."""
        self.doc = Document()
        self._setup_styles()

    def _setup_styles(self) -> None:
        """Configure document styles."""
        style = self.doc.styles["Normal"]
        style.font.name = ARABIC_FONT
        style.font.size = Pt(14)
        style.font.rtl = True
        # Complex-script font slot is the one Word uses for Arabic
        style.element.rPr.rFonts.set(qn("w:cs"), ARABIC_FONT)

        for i in range(1, 3):
            heading_style = self.doc.styles[f"Heading {i}"]
            heading_style.font.name = ARABIC_FONT
            heading_style.font.bold = True
            heading_style.font.rtl = True

    def add_heading(self, text: str, level: int = 1) -> None:
        """Add a right-to-left heading."""
        heading = self.doc.add_heading(text, level=level)
        heading.alignment = WD_ALIGN_PARAGRAPH.RIGHT
        _set_rtl(heading)

    def add_paragraph(
        self,
        text: str,
        bold: bool = False,
        centered: bool = False,
        size: Optional[int] = None,
    ) -> None:
        """Add a right-to-left paragraph."""
        para = self.doc.add_paragraph()
        para.alignment = WD_ALIGN_PARAGRAPH.CENTER if centered else WD_ALIGN_PARAGRAPH.RIGHT
        _set_rtl(para)
        run = para.add_run(text)
        run.bold = bold
        run.font.rtl = True
        if size:
            run.font.size = Pt(size)

    def add_table(self, rows: list[tuple[str, str]]) -> None:
        """Add a two-column label/value table."""
        table = self.doc.add_table(rows=0, cols=2)
        table.style = "Table Grid"
        table.alignment = WD_TABLE_ALIGNMENT.CENTER

        for label, value in rows:
            cells = table.add_row().cells
            # Right-to-left: label in the rightmost column
            cells[1].text = label
            cells[0].text = value
            for paragraph in cells[1].paragraphs:
                for run in paragraph.runs:
                    run.bold = True

        self.doc.add_paragraph()

    def add_judgment(self, text: str) -> None:
        """
        Add the judgment deed text.

        Header lines before the first section heading are centered; section
        headings and the operative lead-in are bold.
        """
        in_body = False
        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            if line == BODY_START:
                in_body = True

            if _is_section_heading(line):
                self.add_paragraph(line, bold=True, centered=True, size=16)
            elif line.startswith("حكمت الدائرة"):
                self.add_paragraph(line, bold=True)
            else:
                self.add_paragraph(line, centered=not in_body)

    def add_decision_summary(self, decision: DecisionRecord) -> None:
        """Add the structured decision as a table."""
        rows = [
            ("الاختصاص", JURISDICTION_COMPETENT if decision.jurisdiction_competent else JURISDICTION_INCOMPETENT),
            ("القبول الشكلي", ADMISSIBLE if decision.formally_admissible else INADMISSIBLE),
            ("النتيجة", decision.outcome.value),
            ("تكييف النزاع", decision.legal_characterization),
            ("الطلبات المقبولة", "، ".join(decision.accepted_claims) or "لا يوجد"),
            ("الطلبات المرفوضة", "، ".join(decision.rejected_claims) or "لا يوجد"),
        ]
        if decision.compensation is not None:
            rows.append(("التعويض", f"{format_arabic_amount(decision.compensation.amount)} ريال"))
        self.add_table(rows)

    def add_transcript(self, messages: Sequence[Message]) -> None:
        """Add the session transcript."""
        for message in messages:
            para = self.doc.add_paragraph()
            para.alignment = WD_ALIGN_PARAGRAPH.RIGHT
            _set_rtl(para)
            run = para.add_run(f"{message.display_name}: ")
            run.bold = True
            run.font.rtl = True
            para.add_run(message.content).font.rtl = True

    def save(self, path: Path) -> None:
        """Save the document."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.doc.save(str(path))


def generate_judgment_docx(
    text: str,
    output_path: Path,
    decision: Optional[DecisionRecord] = None,
    messages: Optional[Sequence[Message]] = None,
) -> Path:
    """
    Generate a judgment DOCX.

    Args:
        text: Accepted judgment text
        output_path: Where to save the document
        decision: Decision to append as a summary table
        messages: Transcript to append

    Returns:
        Path to the generated document
    """
    gen = JudgmentDocxGenerator()
    gen.add_judgment(text)

    if decision is not None:
        gen.doc.add_page_break()
        gen.add_heading("ملخص القرار القضائي", level=1)
        gen.add_decision_summary(decision)

    if messages:
        gen.doc.add_page_break()
        gen.add_heading("محضر الجلسة", level=1)
        gen.add_transcript(messages)

    gen.save(output_path)
    return Path(output_path)
