"""
word_ladder.py — Bidirectional Word Ladder
============================================
Shortest transformation sequence from begin_word to end_word, changing one
letter at a time, every intermediate word taken from the dictionary.

Two BFS frontiers, one growing from each end.  They take turns one full
level at a time: forward, backward, forward, …  A candidate already known
to the other side is a collision; the two partial paths are stitched into
a full ladder and the shortest one seen is kept.  The level on which the
first collision happens is finished, then the search stops.

Yields a Step at:
  1. Start  →  both frontiers seeded
  2. Each word expanded  →  its rejected candidates, with a reason each
  3. Final  →  the ladder, or not found when either frontier runs dry

Candidate order is deterministic: position 0..len-1, letters a..z.
"""

from string import ascii_lowercase
from typing import Dict, Generator, List, Optional, Tuple

from algorithms.step import (
    FrontierEntry,
    RejectedCandidate,
    SearchDirection,
    SearchPayload,
    Step,
    StepBuilder,
)
from problems.instances import WordLadderInstance

NOT_IN_DICTIONARY = "not in dictionary"
ALREADY_VISITED = "already visited"


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def WordLadder(begin, end, words):",                  # 0
    "    fwd ← {begin};  bwd ← {end}",                     # 1
    "    while fwd and bwd:",                              # 2
    "        for word in current level:",                  # 3
    "            for each one-letter change cand:",        # 4
    "                if visited or cand ∉ words: skip",    # 5
    "                if cand seen by other side:",         # 6
    "                    keep shortest stitched path",     # 7
    "                else: add cand to next level",        # 8
    "        if path found: return path",                  # 9
    "        switch direction",                            # 10
    "    return NOT FOUND",                                # 11
]


def _neighbours(word: str):
    for i, original in enumerate(word):
        for ch in ascii_lowercase:
            if ch != original:
                yield word[:i] + ch + word[i + 1:]


def _frontier(level: List[str], paths: Dict[str, Tuple[str, ...]]) -> Tuple[FrontierEntry, ...]:
    return tuple(FrontierEntry(w, paths[w], len(paths[w]) - 1) for w in level)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def word_ladder(instance: WordLadderInstance) -> Generator[Step, None, None]:
    sb = StepBuilder()
    begin, end = instance.begin_word, instance.end_word
    words = set(instance.word_list)

    # path from begin to the key / path from end to the key
    fpath: Dict[str, Tuple[str, ...]] = {begin: (begin,)}
    bpath: Dict[str, Tuple[str, ...]] = {end: (end,)}
    fwd_level: List[str] = [begin]
    bwd_level: List[str] = [end]

    best: Optional[Tuple[str, ...]] = None
    meeting: Optional[str] = None

    def payload(direction=None, current=None, rejected=(), found=None, pending=None) -> SearchPayload:
        # `pending` is the expanding side's queue mid-level: rest of this level, then the next
        fwd = pending if pending is not None and direction is SearchDirection.FORWARD else fwd_level
        bwd = pending if pending is not None and direction is SearchDirection.BACKWARD else bwd_level
        return SearchPayload(
            visited_forward=tuple(fpath),
            visited_backward=tuple(bpath),
            frontier_forward=_frontier(fwd, fpath),
            frontier_backward=_frontier(bwd, bpath),
            direction=direction,
            current=current,
            rejected=tuple(rejected),
            meeting_point=meeting,
            best_path=best or (),
            found=found,
        )

    if begin == end:
        best, meeting = (begin,), begin
        yield sb.emit(payload(), f"Begin word '{begin}' is already the end word", pseudocode_line=1)
        yield sb.emit(payload(found=True), f"Found ladder of length 1: {begin}", pseudocode_line=9, is_final=True)
        return

    yield sb.emit(
        payload(),
        f"Starting bidirectional search from '{begin}' and '{end}'",
        pseudocode_line=1,
    )

    direction = SearchDirection.FORWARD
    while fwd_level and bwd_level:
        forward = direction is SearchDirection.FORWARD
        level = fwd_level if forward else bwd_level
        own, other = (fpath, bpath) if forward else (bpath, fpath)
        next_level: List[str] = []

        for idx, word in enumerate(level):
            rejected: List[RejectedCandidate] = []
            added: List[str] = []
            for cand in _neighbours(word):
                if cand in own:
                    rejected.append(RejectedCandidate(cand, ALREADY_VISITED))
                    continue
                # begin_word need not be in the dictionary but is a valid ladder end
                if cand not in words and cand != begin:
                    rejected.append(RejectedCandidate(cand, NOT_IN_DICTIONARY))
                    continue
                if cand in other:
                    if forward:
                        stitched = own[word] + tuple(reversed(other[cand]))
                    else:
                        stitched = other[cand] + tuple(reversed(own[word]))
                    if best is None or len(stitched) < len(best):
                        best, meeting = stitched, cand
                    continue
                own[cand] = own[word] + (cand,)
                next_level.append(cand)
                added.append(cand)

            side = "forward" if forward else "backward"
            description = f"Expanding '{word}' ({side})"
            if added:
                description += f": queued {', '.join(added)}"
            if meeting is not None:
                description += f". Frontiers meet at '{meeting}'"
            yield sb.emit(
                payload(direction, word, rejected, pending=level[idx + 1:] + next_level),
                description,
                pseudocode_line=7 if meeting is not None else 4,
            )

        if forward:
            fwd_level = next_level
        else:
            bwd_level = next_level

        if best is not None:
            yield sb.emit(
                payload(direction, found=True),
                f"Found ladder of length {len(best)}: {' → '.join(best)}",
                pseudocode_line=9,
                is_final=True,
            )
            return

        direction = SearchDirection.BACKWARD if forward else SearchDirection.FORWARD

    yield sb.emit(
        payload(found=False),
        f"No transformation sequence exists from '{begin}' to '{end}'",
        pseudocode_line=11,
        is_final=True,
    )
