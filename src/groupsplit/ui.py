"""Interactive UI components for picking people from the roster."""

import logging
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .models import Person

logger = logging.getLogger(__name__)


def person_label(person: Person) -> str:
    """Unique display label for a person."""
    return f"{person.name} ({person.id})"


class PersonCompleter(Completer):
    """Completer for group members.

    A query matches a person when it fuzzy-matches their name or is a prefix
    of their id. Name-prefix matches are listed first, then id matches, then
    the remaining fuzzy name matches, each group in roster order.
    """

    def __init__(self, people: list[Person]):
        """Initialize the completer with the roster."""
        self.people = people
        self.label_to_id = {person_label(person): person.id for person in people}

    def get_completions(self, document: Document, complete_event: Any):
        """Get ranked completions for the text typed so far."""
        query = document.text.strip().lower()

        ranked = []
        for person in self.people:
            rank = self._rank(query, person)
            if rank is not None:
                ranked.append((rank, person))

        # sorted() is stable, so ties keep roster order
        for _rank, person in sorted(ranked, key=lambda item: item[0]):
            yield Completion(
                text=person_label(person),
                start_position=-len(document.text),
                display=person.name,
                display_meta=person.id,
            )

    def _rank(self, query: str, person: Person) -> int | None:
        """Match quality of a person for a query; None when it does not match."""
        name = person.name.lower()
        if not query or name.startswith(query):
            return 0
        if person.id.lower().startswith(query):
            return 1
        if self._fuzzy_match(query, name):
            return 2
        return None

    def _fuzzy_match(self, query: str, text: str) -> bool:
        """All characters of query appear in order in text ("aln" ~ "alina")."""
        chars = iter(text)
        return all(char in chars for char in query)

    def resolve(self, text: str) -> str | None:
        """Person id for a completed label or a typed id."""
        text = text.strip()
        if text in self.label_to_id:
            return self.label_to_id[text]
        for person in self.people:
            if person.id == text:
                return person.id
        return None


def select_person_interactive(people: list[Person]) -> str | None:
    """
    Interactive person selection with fuzzy search.

    Returns:
        Selected person ID, or None to skip
    """
    if not people:
        return None

    print("\n👤 Whose balances do you want to see?")
    print("   Type to search, press Enter to confirm, Ctrl+C to skip\n")

    completer = PersonCompleter(people)
    session: PromptSession[str] = PromptSession(completer=completer)

    try:
        while True:
            result = session.prompt("Person: ", complete_while_typing=True)

            if not result:
                return None

            person_id = completer.resolve(result)
            if person_id:
                logger.info(f"User selected person: {person_id}")
                return person_id

            print("❌ Unknown person. Please select from the list or press Tab to complete.")

    except KeyboardInterrupt:
        print("\n⏭️  Skipped")
        return None
    except EOFError:
        return None
