"""Palette selection: decide the effective palette for one image and one standard.

- FIXED standards use their master palette verbatim.
- REDUCIBLE standards use the master palette (or channel depth) unless a
  color limit applies. Then the image's colors are snapped to the
  standard and, when more distinct colors remain than allowed, reduced
  with k-means over the source color histogram. Cluster centres are
  snapped back onto the standard and de-duplicated in order, then topped
  up with the most frequent snapped image colors to exactly N entries.
- SUBPALETTE standards (CGA modes 4/5) score every (sub-palette,
  background) pair by the total distance of mapping the image onto its
  4 colors and keep the lowest. Ties keep the first pair in enumeration
  order (sub-palette order, then background 0..15).
"""

import numpy as np
from sklearn.cluster import KMeans

from retroimg.core import catalog
from retroimg.core.catalog import SubPalette
from retroimg.core.distance import Loss, pairwise_distance
from retroimg.core.errors import InvalidColorCount
from retroimg.core.palette import TablePalette
from retroimg.core.standards import ColorStandard, PaletteKind
from retroimg.core.types import CandidateScore, PaletteSelection

SAMPLE_SEED = 42


def _flat(pixels) -> np.ndarray:
    return np.asarray(pixels, dtype=np.uint8).reshape(-1, 3)


def _unique_in_order(colors: np.ndarray) -> np.ndarray:
    _, first = np.unique(colors, axis=0, return_index=True)
    return colors[np.sort(first)]


def _top_up(chosen: np.ndarray, candidates: np.ndarray, counts: np.ndarray, num_colors: int) -> np.ndarray:
    """Append the most frequent candidates not chosen yet until num_colors remain."""
    taken = {tuple(c) for c in chosen.tolist()}
    extra = []
    for i in np.argsort(-counts, kind='stable'):
        if len(taken) >= num_colors:
            break
        key = tuple(candidates[i].tolist())
        if key not in taken:
            taken.add(key)
            extra.append(candidates[i])
    if not extra:
        return chosen
    return np.vstack([chosen, np.asarray(extra, dtype=np.uint8)])


def validate_color_count(standard: ColorStandard, num_colors: int | None) -> None:
    if num_colors is None:
        return
    if num_colors <= 0:
        raise InvalidColorCount(num_colors)
    if standard.kind is PaletteKind.REDUCIBLE and num_colors > standard.master_size:
        raise InvalidColorCount(num_colors, standard.master_size)


def reduce_palette(pixels, standard: ColorStandard, num_colors: int, loss: Loss = Loss.L2) -> TablePalette:
    """num_colors colors of the standard that best represent the image (fewer only if the image has fewer)."""
    validate_color_count(standard, num_colors)
    master = standard.master_palette()
    flat = _flat(pixels)

    snapped, snapped_counts = np.unique(master.snap(flat, loss), axis=0, return_counts=True)
    if len(snapped) <= num_colors:
        return TablePalette(snapped, name=f'{standard.value}/{len(snapped)}')

    colors, counts = np.unique(flat, axis=0, return_counts=True)
    km = KMeans(n_clusters=num_colors, n_init=3, random_state=SAMPLE_SEED)
    km.fit(colors.astype(np.float64), sample_weight=counts)
    centres = master.snap(km.cluster_centers_, loss)
    # centres snapping onto the same entry leave gaps
    reduced = _top_up(_unique_in_order(centres), snapped, snapped_counts, num_colors)
    return TablePalette(reduced, name=f'{standard.value}/{len(reduced)}')


def _sample(flat: np.ndarray, sample_limit: int | None) -> np.ndarray:
    if sample_limit is None or len(flat) <= sample_limit:
        return flat
    indices = np.random.default_rng(SAMPLE_SEED).choice(len(flat), sample_limit, replace=False)
    return flat[np.sort(indices)]


def score_candidate(pixels, sub_palette: SubPalette, background: int, loss: Loss = Loss.L2) -> float:
    """Total distance of mapping every pixel to its nearest color of the 4-color set."""
    colors = sub_palette.with_background(background)
    dist = pairwise_distance(_flat(pixels), colors, loss)
    return float(dist.min(axis=1).sum())


def score_candidates(
    pixels,
    sub_palettes: tuple[SubPalette, ...],
    loss: Loss = Loss.L2,
    sample_limit: int | None = None,
) -> list[CandidateScore]:
    """Score every (sub-palette, background) pair in enumeration order.

    Distances to the 16 CGA colors are computed once; each candidate then
    only takes a minimum over its 4 columns.
    """
    flat = _sample(_flat(pixels), sample_limit)
    dist = pairwise_distance(flat, catalog.CGA_4BIT, loss)
    scores = []
    for sub_palette in sub_palettes:
        fg_min = dist[:, list(sub_palette.foreground)].min(axis=1)
        for background in range(len(catalog.CGA_4BIT)):
            total = float(np.minimum(fg_min, dist[:, background]).sum())
            scores.append(CandidateScore(sub_palette=sub_palette, background=background, loss=total))
    return scores


def best_candidate(scores: list[CandidateScore]) -> CandidateScore:
    """Lowest loss; the earliest candidate wins ties."""
    best = scores[0]
    for score in scores[1:]:
        if score.loss < best.loss:
            best = score
    return best


def select_palette(
    pixels,
    standard: 'ColorStandard | str',
    num_colors: int | None = None,
    loss: Loss = Loss.L2,
    sample_limit: int | None = None,
) -> PaletteSelection:
    """Choose the effective palette of `standard` for an H x W x 3 image."""
    standard = ColorStandard.parse(standard)
    validate_color_count(standard, num_colors)

    if standard.kind is PaletteKind.SUBPALETTE:
        scores = score_candidates(pixels, standard.sub_palettes, loss, sample_limit)
        best = best_candidate(scores)
        palette = TablePalette(
            best.sub_palette.with_background(best.background),
            name=f'{best.sub_palette.name}+{catalog.CGA_COLOR_NAMES[best.background]}',
        )
        return PaletteSelection(
            standard=standard,
            palette=palette,
            sub_palette=best.sub_palette,
            background=best.background,
            loss=best.loss,
            candidates=scores,
        )

    if standard.kind is PaletteKind.REDUCIBLE and num_colors is not None:
        palette = reduce_palette(pixels, standard, num_colors, loss)
        return PaletteSelection(standard=standard, palette=palette, num_colors=num_colors)

    return PaletteSelection(standard=standard, palette=standard.master_palette())
