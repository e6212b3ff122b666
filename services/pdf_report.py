"""
PDF rendering of an evaluation report with reportlab platypus.

The renderer walks the blocks produced by ``build_layout`` and turns each
role into flowables. Consecutive table rows become a single grid table whose
header repeats on every page it spans.
"""
from dataclasses import dataclass
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Flowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from services.report_layout import FREE_TEXT, HEADER, LEGEND, SIGNATURE, TABLE_ROW, build_layout

MARGIN = 15 * mm
CONTENT_WIDTH = A4[0] - 2 * MARGIN
GRID_COLOR = colors.HexColor("#808080")
HEADER_BACKGROUND = colors.HexColor("#e6e6e6")


@dataclass(frozen=True)
class PdfOptions:
    grid_table: bool = True
    include_comments: bool = True


def _styles():
    sheet = getSampleStyleSheet()
    base = sheet["Normal"]
    return {
        "normal": ParagraphStyle("pfmp-normal", parent=base, fontSize=10, leading=13),
        "small": ParagraphStyle("pfmp-small", parent=base, fontSize=8, leading=10),
        "bold": ParagraphStyle("pfmp-bold", parent=base, fontName="Helvetica-Bold", fontSize=12, leading=15),
        "cell_bold": ParagraphStyle("pfmp-cell-bold", parent=base, fontName="Helvetica-Bold", fontSize=9, leading=11),
        "cell": ParagraphStyle("pfmp-cell", parent=base, fontSize=9, leading=11),
        "title": ParagraphStyle(
            "pfmp-title", parent=base, fontName="Helvetica-Bold", fontSize=16, leading=20,
            alignment=TA_CENTER, spaceBefore=8,
        ),
        "right": ParagraphStyle("pfmp-right", parent=base, fontSize=10, leading=13, alignment=TA_RIGHT),
        "candidate": ParagraphStyle("pfmp-candidate", parent=base, fontName="Helvetica-Bold", fontSize=14, leading=18),
        "centered": ParagraphStyle("pfmp-centered", parent=base, fontSize=9, leading=11, alignment=TA_CENTER),
    }


def _level_color(level):
    return colors.Color(*(channel / 255 for channel in level.rgb))


def _para(text, style):
    return Paragraph(escape(text or "").replace("\n", "<br/>"), style)


class SignatureBlock(Flowable):
    """
    Signature area drawn against the bottom margin.

    It claims the whole remaining frame height, so it always ends at the
    bottom of the page; when less than ``MIN_HEIGHT`` remains it no longer
    fits and platypus moves it to a fresh page.
    """

    MIN_HEIGHT = 35 * mm

    def __init__(self, labels):
        super().__init__()
        self.labels = labels

    def wrap(self, avail_width, avail_height):
        self.width = avail_width
        self.height = max(avail_height, self.MIN_HEIGHT)
        return self.width, self.height

    def split(self, avail_width, avail_height):
        return []

    def draw(self):
        canvas = self.canv
        column_width = self.width / len(self.labels)
        canvas.saveState()
        canvas.setFont("Helvetica", 10)
        canvas.setStrokeColor(GRID_COLOR)
        for index, label in enumerate(self.labels):
            x = index * column_width
            canvas.drawString(x, self.MIN_HEIGHT - 6 * mm, label)
            canvas.rect(x, 0, column_width - 6 * mm, self.MIN_HEIGHT - 10 * mm, stroke=1, fill=0)
        canvas.restoreState()


def _render_header(block, styles, options):
    content = block.content
    flowables = [Paragraph(escape(line), styles["bold"]) for line in content["subtitle"]]
    flowables += [
        Paragraph(escape(content["title"]), styles["title"]),
        Paragraph(escape(content["dates"]), styles["right"]),
        Spacer(1, 4 * mm),
        Paragraph(escape(content["candidate_label"]), styles["bold"]),
        Paragraph(escape(content["candidate"]), styles["candidate"]),
    ]
    for label, value in content["details"]:
        if value:
            flowables.append(Paragraph(f"<b>{escape(label)} :</b> {escape(value)}", styles["normal"]))
    flowables += [Spacer(1, 4 * mm), Paragraph(escape(content["section"]), styles["bold"])]
    return flowables


def _render_legend(block, styles, options):
    levels = block.content["levels"]
    row = []
    widths = []
    for level in levels:
        row += ["", Paragraph(escape(level.short_label), styles["small"])]
        widths += [5 * mm, CONTENT_WIDTH / len(levels) - 5 * mm]

    legend = Table([row], colWidths=widths, hAlign="LEFT")
    commands = [("VALIGN", (0, 0), (-1, -1), "MIDDLE")]
    for index, level in enumerate(levels):
        col = index * 2
        commands += [
            ("BACKGROUND", (col, 0), (col, 0), _level_color(level)),
            ("BOX", (col, 0), (col, 0), 0.5, GRID_COLOR),
        ]
    legend.setStyle(TableStyle(commands))

    return [
        Spacer(1, 2 * mm),
        Paragraph(escape(block.content["criteria"]), styles["small"]),
        Paragraph("<b>Légende :</b>", styles["small"]),
        legend,
        Spacer(1, 4 * mm),
    ]


def _render_rows_as_grid(rows, styles, options):
    header = ["Compétence", "Sous-compétence", "Niveau"]
    widths = [45 * mm, 75 * mm, 18 * mm]
    if options.include_comments:
        header.append("Commentaire")
        widths.append(CONTENT_WIDTH - sum(widths))
    else:
        widths[1] = CONTENT_WIDTH - widths[0] - widths[2]

    table_data = [[Paragraph(escape(h), styles["cell_bold"]) for h in header]]
    commands = [
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BACKGROUND),
        ("GRID", (1, 0), (-1, -1), 0.5, GRID_COLOR),
        ("BOX", (0, 0), (0, 0), 0.5, GRID_COLOR),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("ALIGN", (2, 0), (2, -1), "CENTER"),
    ]

    cluster_start = None
    for row_index, block in enumerate(rows, start=1):
        content = block.content
        level = content["level"]
        if content["first_of_cluster"]:
            if cluster_start is not None:
                commands.append(("BOX", (0, cluster_start), (0, row_index - 1), 0.5, GRID_COLOR))
            cluster_start = row_index
            cluster_cell = Paragraph(escape(content["cluster"].heading), styles["cell_bold"])
        else:
            cluster_cell = ""

        cells = [
            cluster_cell,
            Paragraph(escape(content["item"].label), styles["cell"]),
            Paragraph(escape(level.symbol), styles["centered"]),
        ]
        if options.include_comments:
            cells.append(_para(content["commentaire"], styles["cell"]))
        table_data.append(cells)
        commands.append(("BACKGROUND", (2, row_index), (2, row_index), _level_color(level)))

    if cluster_start is not None:
        commands.append(("BOX", (0, cluster_start), (0, -1), 0.5, GRID_COLOR))

    # Rows may be taller than a page once comments get long; let them split.
    table = Table(table_data, colWidths=widths, repeatRows=1, splitInRow=1)
    table.setStyle(TableStyle(commands))
    return [table, Spacer(1, 6 * mm)]


def _render_rows_as_list(rows, styles, options):
    flowables = []
    for block in rows:
        content = block.content
        level = content["level"]
        if content["first_of_cluster"]:
            flowables.append(Spacer(1, 2 * mm))
            flowables.append(Paragraph(escape(content["cluster"].heading), styles["cell_bold"]))

        line = f"{content['item'].short_label} [{level.symbol}]"
        swatch = Table(
            [["", Paragraph(escape(line), styles["cell"])]],
            colWidths=[4 * mm, CONTENT_WIDTH - 12 * mm],
            hAlign="LEFT",
        )
        swatch.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (0, 0), _level_color(level)),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        flowables.append(swatch)
        if options.include_comments and content["commentaire"]:
            flowables.append(_para(content["commentaire"], styles["small"]))
    flowables.append(Spacer(1, 6 * mm))
    return flowables


def _render_rows(rows, styles, options):
    if options.grid_table:
        return _render_rows_as_grid(rows, styles, options)
    return _render_rows_as_list(rows, styles, options)


def _render_free_text(block, styles, options):
    text = block.content["text"]
    if not text:
        return []
    return [
        Paragraph(escape(block.content["title"]), styles["bold"]),
        _para(text, styles["normal"]),
        Spacer(1, 4 * mm),
    ]


def _render_signature(block, styles, options):
    return [SignatureBlock(block.content["labels"])]


BLOCK_RENDERERS = {
    HEADER: _render_header,
    LEGEND: _render_legend,
    FREE_TEXT: _render_free_text,
    SIGNATURE: _render_signature,
}


def render_pdf(data, options=None):
    """Render ``ReportData`` to PDF bytes. Same data and options, same bytes."""
    options = options or PdfOptions()
    styles = _styles()

    story = []
    pending_rows = []
    for block in build_layout(data):
        if block.role == TABLE_ROW:
            pending_rows.append(block)
            continue
        if pending_rows:
            story.extend(_render_rows(pending_rows, styles, options))
            pending_rows = []
        story.extend(BLOCK_RENDERERS[block.role](block, styles, options))
    if pending_rows:
        story.extend(_render_rows(pending_rows, styles, options))

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=f"PFMP {data.eleve.nom} {data.eleve.prenom} - {data.periode.nom}",
        invariant=1,
    )
    doc.build(story)
    return buffer.getvalue()
