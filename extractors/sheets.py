"""
Sheets Extractor — Pure function for flattening a CSV export to readable text.

Receives the text/csv export of a Google Sheet, returns one line per
non-blank row with cells separated by " | ".
No API calls.
"""

CELL_DELIMITER = " | "


def flatten_csv(csv_text: str) -> str:
    """
    Flatten CSV text into pipe-delimited lines.

    Every comma becomes the delimiter, quoted or not: the output is for
    reading, not for parsing back. Drive exports use CRLF line endings; the
    CR is dropped.

    Example:
        "a,b,c\\n\\n1,2,3\\n" -> "a | b | c\\n1 | 2 | 3"
    """
    rows: list[str] = []
    for line in csv_text.split("\n"):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        rows.append(line.replace(",", CELL_DELIMITER))
    return "\n".join(rows)
