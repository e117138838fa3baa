from typing import Iterable, List
from models.schemas import ShortcutLink

def split_keywords(keywords: str) -> List[str]:
    """Comma-separated keywords as trimmed, lower-cased terms (empty terms dropped)"""
    return [term for term in (k.strip() for k in keywords.lower().split(",")) if term]

def terms_overlap(word: str, term: str) -> bool:
    return word in term or term in word

def find_matching_links(task_title: str, links: Iterable[ShortcutLink]) -> List[ShortcutLink]:
    """Simple fuzzy keyword matching against saved shortcuts.

    A link matches when any word of the title and any of its keyword terms
    are substrings of one another. Results keep store order and are not
    truncated.
    """
    task_words = (task_title or "").lower().split()
    if not task_words:
        return []

    matches = []
    for link in links:
        keywords = split_keywords(link.keywords)
        if any(terms_overlap(word, term) for word in task_words for term in keywords):
            matches.append(link)

    return matches
