"""Prompt templates for the extraction request.

One template per ``ExtractionMode``; the system prompt carries the rules
shared by every mode.
"""

import textwrap

from screen_extractor.models import ExtractionMode

ILLEGIBLE_MARKER = "[illegible]"
UNCERTAIN_MARKER = "[uncertain]"

ROLE_LINE = "You convert clipboard images into structured text for pasting."

GLOBAL_RULES = (
    "Start output directly with content. Do not begin with phrases like "
    "'This image' or 'The image'.",
    "Extract ALL visible text exactly when readable; preserve capitalization and units.",
    f"Never invent numbers. If unreadable, output {ILLEGIBLE_MARKER} or {UNCERTAIN_MARKER}.",
    "No markdown code fences.",
    "Keep output compact but complete for the selected mode.",
)

CONFIDENCE_DIRECTIVE = (
    "End with a single line: Confidence: high|medium|low "
    "(choose based on legibility)."
)

TABLE_TEMPLATE = """
Output TSV only (tabs between cells, newline between rows).
If header exists, include it as first row.
Preserve blank cells; for merged cells repeat value if clear, else leave blank and add final line 'Notes: merged cells present'.
"""

CHART_TEMPLATE = """
Output these sections in order:
Chart: <type (line, bar, scatter, pie, area, histogram, other)>; Title: <title if present>
Axes: X: <label> (<units if shown>) range <min>..<max>; Y: <label> (<units if shown>) range <min>..<max>
Legend: series names in legend order
Then for EACH series:
Series: <name>
  Centroid: (<x>, <y>)
  Spread: tight|moderate|wide
  X range: <min>..<max>; Y range: <min>..<max>
  Pattern: linear|exponential|logarithmic|constant|periodic|scattered (increasing/decreasing where it applies)
  Features: peaks, troughs, plateaus, discontinuities, outliers with their approximate coordinates; 'none' if absent
  Points: <x>\\t<y> rows for clearly readable data points
Across series:
Correlations: how series move relative to each other
Clusters: groups of points or series that sit together
Crossovers: where series intersect, with approximate coordinates
Prefix every value read approximately (interpolated from gridlines or position) with ~; values printed on the chart carry no prefix.
Notes: uncertainties and unreadable areas; do NOT guess points that are not readable.
"""

DIAGRAM_TEMPLATE = """
Output:
Components: bullet list of main objects/regions.
Labels: each as '<label text> -> <what it points to/describes>'.
Relationships: bullet list 'A -> B (label if present)' for arrows/flows, following arrow direction.
Extract every label exactly.
"""

TEXT_TEMPLATE = """
Transcribe all visible text verbatim in reading order.
Preserve structure: paragraphs, headings, list markers and line breaks; keep indentation exactly for code.
Render interactive UI elements as bracketed tags: [button: <label>], [link: <text>], [input: <placeholder or value>], [checkbox: <label> (checked|unchecked)].
Do not summarize, explain or comment on the content.
"""

GENERAL_TEMPLATE = """
First decide what the image mainly contains (table, chart, diagram, text, or photo/other) and apply the matching strategy:
- table: TSV rows, header first.
- chart: axes, legend, then per-series values and patterns; prefix approximate values with ~.
- diagram: components, labels, and 'A -> B' relationships.
- text: verbatim transcription in reading order.
Otherwise output:
Short noun-phrase title/summary.
Visible text: lines of OCR-like text in reading order.
Key details: bullet list of important objects/regions with attributes.
Scale the amount of detail to the complexity of the content.
"""

MODE_TEMPLATES: dict[ExtractionMode, str] = {
    ExtractionMode.TABLE: TABLE_TEMPLATE,
    ExtractionMode.CHART: CHART_TEMPLATE,
    ExtractionMode.DIAGRAM: DIAGRAM_TEMPLATE,
    ExtractionMode.TEXT: TEXT_TEMPLATE,
    ExtractionMode.GENERAL: GENERAL_TEMPLATE,
}


def build_system_prompt(include_confidence: bool = False) -> str:
    lines = [ROLE_LINE, *GLOBAL_RULES]
    if include_confidence:
        lines.append(CONFIDENCE_DIRECTIVE)
    return "\n".join(lines)


def mode_instructions(mode: ExtractionMode) -> str:
    """Return the instruction block for ``mode``."""
    return textwrap.dedent(MODE_TEMPLATES[mode]).strip()


def build_user_prompt(mode: ExtractionMode) -> str:
    return (
        f"Mode: {mode.value.upper()}\n"
        f"{mode_instructions(mode)}\n"
        "Return the extracted content now."
    )
