from __future__ import annotations

from typing import List, Optional, Tuple

from .models import PedigreeNode

UNKNOWN_LABEL = "?"


def render_pedigree_ascii(
    tree: Optional[PedigreeNode],
    *,
    max_generations: int,
    x_gap: int = 5,
    show_unknown: bool = True,
) -> str:
    """
    Sideways pedigree. Left -> right is deeper generations, sire above dam.

             +- Bruno
        Rex -|
             +- Bella

    Symbols:
      ? = unknown parent (only drawn for nodes inside the generation bound)
      +- = link from a parent column into a dog label
    """
    if tree is None:
        return ""
    if x_gap < 4:
        raise ValueError("x_gap must be at least 4")

    # --- layout: simple recursive tidy layout, leaves two rows apart ---
    next_leaf_y = 0
    placed: List[Tuple[str, int, int, List[int]]] = []  # (label, depth, y, child_ys)

    def layout(node: Optional[PedigreeNode], depth: int) -> int:
        nonlocal next_leaf_y
        label = node.name if node is not None else UNKNOWN_LABEL

        parents: List[Optional[PedigreeNode]] = []
        if node is not None and depth < max_generations:
            for parent in (node.sire, node.dam):
                if parent is None and not show_unknown:
                    continue
                parents.append(parent)

        if not parents:
            y = next_leaf_y
            next_leaf_y += 2
            placed.append((label, depth, y, []))
            return y

        child_ys = [layout(p, depth + 1) for p in parents]
        y = (child_ys[0] + child_ys[-1]) // 2
        placed.append((label, depth, y, child_ys))
        return y

    layout(tree, 0)

    # --- columns: each generation is as wide as its longest label ---
    max_depth = max(depth for _, depth, _, _ in placed)
    widths = [0] * (max_depth + 1)
    for label, depth, _, _ in placed:
        widths[depth] = max(widths[depth], len(label))

    col_x = [0] * (max_depth + 1)
    for d in range(1, max_depth + 1):
        col_x[d] = col_x[d - 1] + widths[d - 1] + x_gap

    width = col_x[max_depth] + widths[max_depth]
    height = max(y for _, _, y, _ in placed) + 1
    canvas = [[" " for _ in range(width)] for _ in range(height)]

    def put(x: int, y: int, ch: str) -> None:
        if 0 <= y < height and 0 <= x < width:
            canvas[y][x] = ch

    def draw_h(x1: int, x2: int, y: int) -> None:
        for x in range(min(x1, x2), max(x1, x2) + 1):
            if canvas[y][x] == " ":
                canvas[y][x] = "-"

    def draw_v(x: int, y1: int, y2: int) -> None:
        for yy in range(min(y1, y2), max(y1, y2) + 1):
            if canvas[yy][x] == " ":
                canvas[yy][x] = "|"

    # Edges first, labels last so text always wins
    for label, depth, y, child_ys in placed:
        if not child_ys:
            continue
        jx = col_x[depth + 1] - 3  # join column
        draw_h(col_x[depth] + len(label) + 1, jx - 1, y)
        draw_v(jx, min(child_ys + [y]), max(child_ys + [y]))
        for cy in child_ys:
            put(jx, cy, "+")
            put(jx + 1, cy, "-")

    for label, depth, y, _ in placed:
        for i, ch in enumerate(label):
            put(col_x[depth] + i, y, ch)

    lines = ["".join(row).rstrip() for row in canvas]
    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines)
