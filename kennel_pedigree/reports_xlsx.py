from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from .advisory import risk_level
from .identifiers import normalize_dog_id
from .models import LinebreedingResult

REPORT_HEADERS = [
    "SireId",
    "SireName",
    "DamId",
    "DamName",
    "Generations",
    "Coefficient",
    "Diversity",
    "CommonAncestors",
    "TopAncestor",
    "TopContribution",
    "Risk",
]


def _get_or_create_sheet(wb: Workbook, sheet_name: str) -> Worksheet:
    if sheet_name in wb.sheetnames:
        return wb[sheet_name]
    return wb.create_sheet(title=sheet_name)


def _read_headers(ws: Worksheet) -> list[str]:
    if ws.max_row < 1:
        return []
    out: list[str] = []
    for cell in ws[1]:
        v = cell.value
        out.append(str(v) if v is not None else "")
    while out and out[-1] == "":
        out.pop()
    return out


def _ensure_headers(ws: Worksheet) -> list[str]:
    """
    Write the report headers on an empty sheet.
    Columns added by hand to an existing sheet are kept; missing report
    columns are appended after them.
    """
    existing = _read_headers(ws)
    missing = [h for h in REPORT_HEADERS if h not in set(existing)]
    if existing and not missing:
        return existing

    updated = existing + missing
    for col_idx, h in enumerate(updated, start=1):
        ws.cell(row=1, column=col_idx, value=h)
    return updated


def _cell_int_or_none(v: Any) -> Optional[int]:
    if v is None:
        return None
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        # Excel may store ints as floats
        if abs(v - int(v)) < 1e-9:
            return int(v)
        return None
    if isinstance(v, str) and v.strip().isdigit():
        return int(v.strip())
    return None


def _find_matching_rows(
    ws: Worksheet,
    header_to_col: dict[str, int],
    *,
    sire_id: str,
    dam_id: str,
    generations: int,
) -> list[int]:
    """Worksheet rows (>=2) keyed by (SireId, DamId, Generations)."""
    c_sire = header_to_col["SireId"]
    c_dam = header_to_col["DamId"]
    c_gen = header_to_col["Generations"]

    matches: list[int] = []
    for r in range(2, ws.max_row + 1):
        if _cell_int_or_none(ws.cell(row=r, column=c_gen).value) != generations:
            continue
        if normalize_dog_id(ws.cell(row=r, column=c_sire).value) != sire_id:
            continue
        if normalize_dog_id(ws.cell(row=r, column=c_dam).value) != dam_id:
            continue
        matches.append(r)
    return matches


def analysis_row(result: LinebreedingResult) -> dict[str, Any]:
    top = result.top_ancestor
    return {
        "SireId": result.dog.canonical_id,
        "SireName": result.dog.name,
        "DamId": result.dam.canonical_id,
        "DamName": result.dam.name,
        "Generations": result.generations,
        "Coefficient": result.inbreeding_coefficient,
        "Diversity": result.genetic_diversity,
        "CommonAncestors": len(result.common_ancestors),
        "TopAncestor": top.dog.name if top is not None else "",
        "TopContribution": top.contribution if top is not None else 0.0,
        "Risk": risk_level(result.inbreeding_coefficient),
    }


def append_analysis_row(
    *,
    xlsx_path: Path,
    sheet_name: str,
    result: LinebreedingResult,
) -> None:
    """
    UPSERT one pairing into the analysis workbook.

    Behavior:
      - If file doesn't exist: create with headers.
      - If a row for (SireId, DamId, Generations) exists: overwrite it and
        delete any duplicates of that key.
      - Otherwise append a new row.
    """
    xlsx_path = Path(xlsx_path)
    existed = xlsx_path.exists()

    wb = load_workbook(xlsx_path) if existed else Workbook()
    ws = _get_or_create_sheet(wb, sheet_name)

    # Drop the empty default sheet of a fresh workbook
    if not existed and "Sheet" in wb.sheetnames and sheet_name != "Sheet":
        wb.remove(wb["Sheet"])

    headers = _ensure_headers(ws)
    header_to_col = {h: i + 1 for i, h in enumerate(headers)}
    row_data = analysis_row(result)

    matching_rows = _find_matching_rows(
        ws,
        header_to_col,
        sire_id=row_data["SireId"],
        dam_id=row_data["DamId"],
        generations=result.generations,
    )

    if matching_rows:
        target_row = matching_rows[0]
        # Bottom-up so earlier indices stay valid
        for r in sorted(matching_rows[1:], reverse=True):
            ws.delete_rows(r, 1)
    else:
        target_row = max(ws.max_row, 1) + 1

    for h, v in row_data.items():
        ws.cell(row=target_row, column=header_to_col[h], value=v)

    xlsx_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(xlsx_path)
