"""HTML reporter — self-contained per-line coverage page.

The page is a fixed template: the style sheet and layout never change, only
the summary values and the table rows are filled in. Source lines are
emitted verbatim.
"""

from __future__ import annotations

import logging
from string import Template
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from filecov.models.coverage import ClassifiedLine, CoverageReport

logger = logging.getLogger(__name__)

_LINE_NUMBER_WIDTH = 4

_ROW_TEMPLATE = Template(
    "<tr>\n"
    '    <td class="line-number-row">$line_number</td>\n'
    '    <td class="$css_class">$text</td>\n'
    "</tr>"
)

_PAGE_TEMPLATE = Template(
    """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Coverage Report</title>
  <style>
    body {
        font-family: Arial, sans-serif;
        line-height: 1.6;
        padding: 20px;
    }
    table {
        width: 100%;
        border-collapse: collapse;
        margin-bottom: 20px;
    }
    th, td {
        padding: 8px;
        margin-left: 20px;
        text-align: left;
        border-bottom: 1px solid #fdfdfd;
    }
    .line-number-col {
        width: 2%;
    }
    .line-number-row {
        border-right: 1px dashed #000000
    }
    .source-code-col {
        width: 98%;
    }
    .covered-line, .not-covered-line, .uncovered-line {
        white-space: pre-wrap;
        word-wrap: break-word;
        box-sizing: border-box;
        border-radius: 4px;
        padding: 2px 8px 2px 4px;
        display: inline-block;
    }
    .covered-line {
        background-color: #c8e6c9; /* Light green */
    }
    .not-covered-line {
        background-color: #ffcdd2; /* Light red */
    }
    .uncovered-line {
        background-color: #f1f1f1; /* light gray */
    }
    .coverage-summary {
      margin-bottom: 20px;
    }
    h2 {
      text-align: center;
    }
    ul {
      list-style-type: none;
      padding: 0;
      text-align: center;
    }
    .summary-box {
      background-color: #f0f0f0;
      border: 1px solid #ccc;
      border-radius: 8px;
      padding: 10px;
      margin-bottom: 20px;
      display: flex;
      justify-content: space-between;
      align-items: flex-start;
    }
    .summary-left {
      text-align: left;
    }
    .summary-right {
      text-align: right;
    }
    .legend {
      display: flex;
      align-items: center;
    }
    .legend-item {
      width: 20px;
      height: 10px;
      margin-right: 5px;
      border-radius: 2px;
      display: inline-block;
    }
    .legend .covered {
      background-color: #c8e6c9; /* Light green */
    }
    .legend .not-covered {
      margin-left: 4px;
      background-color: #ffcdd2; /* Light red */
    }
    @media screen and (max-width: 768px) {
        body {
            padding: 10px;
        }
        table {
            width: auto;
        }
    }
  </style>
</head>
<body>
  <h2>Coverage Report</h2>
  <div class="summary-box">
    <div class="summary-left">
      <strong>Covered File:</strong> $file_path <br>
      <div class="legend">
        <div class="legend-item covered"></div>
        <span>Covered</span>
        <div class="legend-item not-covered"></div>
        <span>Uncovered</span>
      </div>
    </div>
    <div class="summary-right">
      <div><strong>Coverage percentage:</strong> ${percentage}%</div>
      <div><strong>Line coverage:</strong> $covered / $total covered</div>
    </div>
  </div>
  <table>
    <thead>
      <tr>
        <th class="line-number-col">Line No</th>
        <th class="source-code-col">Source Code</th>
      </tr>
    </thead>
    <tbody>$rows    </tbody>
  </table>
</body>
</html>"""
)


def render_row(line: ClassifiedLine) -> str:
    """Render one table row: the padded line number and the literal source text."""
    return _ROW_TEMPLATE.substitute(
        line_number=str(line.line_number).rjust(_LINE_NUMBER_WIDTH),
        css_class=line.status.css_class,
        text=line.text,
    )


class HTMLReporter:
    """Renders a CoverageReport as a standalone HTML page."""

    def render(self, report: CoverageReport) -> str:
        """Return the full HTML document (no trailing newline)."""
        rows = "".join(render_row(line) for line in report.lines)
        summary = report.summary
        logger.debug("Rendering HTML report for %s (%d rows)", report.file_path, len(report.lines))
        return _PAGE_TEMPLATE.substitute(
            file_path=report.file_path,
            percentage=summary.percentage_text,
            covered=summary.covered,
            total=summary.total,
            rows=rows,
        )
