"""Shared helpers for relay tests."""

from __future__ import annotations

from typing import List

from llmagent.base.streaming import Fragment, RelayChannel


def make_fragments(*contents: str) -> List[Fragment]:
    """Build content Fragments where the last one is terminal."""

    fragments = [Fragment(content=c) for c in contents]
    if fragments:
        fragments[-1] = Fragment(content=contents[-1], is_terminal=True)
    return fragments


def collect(channel: RelayChannel, timeout: float = 5.0) -> List[Fragment]:
    """Receive every Fragment until the channel reports closure."""

    out: List[Fragment] = []
    while (fragment := channel.receive(timeout=timeout)) is not None:
        out.append(fragment)
    return out
