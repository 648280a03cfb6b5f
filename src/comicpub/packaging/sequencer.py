# ABOUTME: Numbering and spread-alternation policy for body pages.
# ABOUTME: place_page is a pure function of (prior state, new page) -> (next state, base name).

from dataclasses import dataclass, replace

from comicpub.packaging.errors import PageSortingError

COVER_BASE_NAME = "cover"


@dataclass(frozen=True)
class SequencerState:
    """Counters carried from one accepted body page to the next.

    spread_allowed starts False and flips on every regular page; spreads
    leave it unchanged. A spread is only accepted while it is True, that is
    after an odd number of regular pages.
    """

    page_number: int = 0
    chapter_number: int = 0
    spread_allowed: bool = False
    placed: int = 0


def format_base_name(volume: int, page_number: int, chapter_number: int) -> str:
    """Fixed-width identifier whose lexical order equals reading order."""
    return f"S{volume:02d}-C{page_number:06d}P{chapter_number:06d}"


def place_page(
    state: SequencerState, *, spread: bool, labeled: bool, volume: int = 1
) -> tuple[SequencerState, str]:
    """Place one body page after everything accepted so far.

    A labeled page, or the very first page, opens a new page-number group
    and restarts the chapter counter; every page then bumps the chapter
    counter.

    Args:
        state: State after the previously accepted page.
        spread: Whether the page is a spread.
        labeled: Whether the page carries a navigation label.
        volume: Volume number embedded in the base name.

    Returns:
        The state to carry forward and the base name for the page.

    Raises:
        PageSortingError: If a spread arrives while spreads are not allowed.
            The error carries the 1-based index the page would have had.
            The caller's state is left as it was.
    """
    if spread and not state.spread_allowed:
        raise PageSortingError(state.placed + 1)

    page_number = state.page_number
    chapter_number = state.chapter_number
    if labeled or page_number == 0:
        page_number += 1
        chapter_number = 0
    chapter_number += 1

    spread_allowed = state.spread_allowed if spread else not state.spread_allowed

    next_state = replace(
        state,
        page_number=page_number,
        chapter_number=chapter_number,
        spread_allowed=spread_allowed,
        placed=state.placed + 1,
    )
    return next_state, format_base_name(volume, page_number, chapter_number)
