"""
Narrowing policies for the two kinds of menus.

Top-level commands narrow by prefix and keep declaration order. Item lists
narrow by fuzzy matching, delegated to prompt_toolkit's FuzzyCompleter.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from prompt_toolkit.completion import CompleteEvent, Completer, Completion, FuzzyCompleter
from prompt_toolkit.document import Document

from superspace.config.models import CommandEntry, ListItem

# Each query word is matched as a whole; words never contain whitespace
_WHOLE_WORD = r"^([\s\S]+)"

_INSIDE_STYLE = "fuzzymatch.inside"


def prefix_matches(query: str, commands: Mapping[str, CommandEntry]) -> list[str]:
    """Prefixes of commands starting with query, in declaration order."""
    matches = [entry for prefix, entry in commands.items() if prefix.startswith(query)]
    matches.sort(key=lambda entry: entry.index)
    return [entry.prefix for entry in matches]


class _NameCompleter(Completer):
    """Yields every candidate name; filtering is left to FuzzyCompleter."""

    def __init__(self, names: Iterable[str]):
        self.names = list(names)

    def get_completions(self, document, complete_event):
        for name in self.names:
            yield Completion(name, start_position=0)


class FuzzyMatcher:
    """Case-insensitive fuzzy ranking of list items by name.

    The query is split on whitespace and every word must fuzzy-match the
    name. Matches are ordered best first by the summed match start of each
    word, then the summed matching span. Equal scores keep their input
    order. A query without words matches everything in input order.
    """

    def _word_scores(self, word: str, names: Sequence[str]) -> dict[str, tuple[int, int]]:
        """(start, span) of the best match of word in each matching name."""
        completer = FuzzyCompleter(_NameCompleter(names), pattern=_WHOLE_WORD)
        document = Document(word, cursor_position=len(word))

        scores = {}
        for completion in completer.get_completions(document, CompleteEvent()):
            # Display is: text before the match, one fragment per matched
            # character, text after the match
            fragments = completion.display
            start = len(fragments[0][1])
            span = sum(len(f[1]) for f in fragments if _INSIDE_STYLE in f[0])
            scores[completion.text] = (start, span)
        return scores

    def _ranked_indices(self, query: str, names: Sequence[str]) -> list[int]:
        words = query.split()
        if not words:
            return list(range(len(names)))

        totals = {name: (0, 0) for name in names}
        for word in words:
            scores = self._word_scores(word, list(totals))
            totals = {
                name: (start + scores[name][0], span + scores[name][1])
                for name, (start, span) in totals.items()
                if name in scores
            }
            if not totals:
                return []

        indices = [i for i, name in enumerate(names) if name in totals]
        indices.sort(key=lambda i: totals[names[i]])
        return indices

    def rank_names(self, query: str, names: Sequence[str]) -> list[str]:
        """Names matching every word of query, best match first."""
        return [names[i] for i in self._ranked_indices(query, names)]

    def rank(self, query: str, items: Sequence[ListItem]) -> list[ListItem]:
        """Items whose names match every word of query, best match first."""
        names = [item.name for item in items]
        return [items[i] for i in self._ranked_indices(query, names)]
