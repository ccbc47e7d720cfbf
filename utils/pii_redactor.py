"""
PII redaction for text that leaves the device.

Names, street locations, email addresses and German phone numbers are replaced
by numbered placeholders such as [NAME]_1. The mapping returned alongside the
scrubbed text restores the original exactly.

This is a best-effort heuristic, not certified anonymization:
- Every capitalized word outside COMMON_WORDS is treated as part of a name,
  so city names are reported as names ("in Hamburg" -> [NAME]_n).
- German nouns missing from COMMON_WORDS are over-redacted. They still
  round-trip through unscrub.
"""

import re
from typing import Dict, Iterator, List, Optional, Tuple

from core import get_logger
from schemas import RedactionResult, ScrubOptions

logger = get_logger(__name__)


DEFAULT_PLACEHOLDERS = {
    "name": "[NAME]",
    "location": "[LOCATION]",
    "email": "[EMAIL]",
    "phone": "[PHONE]",
}

CATEGORIES = ("name", "location", "email", "phone")

TITLES = frozenset({
    "Herr", "Herrn", "Frau", "Fräulein", "Doktor", "Dr", "Professor", "Prof",
    "Mr", "Mrs", "Ms", "Miss",
})

STREET_SUFFIXES = ("straße", "strasse", "weg", "platz", "allee", "gasse", "ring")

# Capitalized words that are never redacted and split name runs
COMMON_WORDS = TITLES | frozenset({
    # Pronouns, articles and sentence starters (de)
    "Ich", "Du", "Sie", "Wir", "Ihr", "Er", "Es", "Man", "Mich", "Mir", "Dich", "Dir", "Uns", "Euch",
    "Ihm", "Ihn", "Ihnen", "Mein", "Meine", "Meinem", "Meinen", "Meiner", "Dein", "Deine", "Sein",
    "Seine", "Ihre", "Unser", "Unsere", "Der", "Die", "Das", "Den", "Dem", "Des", "Ein", "Eine",
    "Einen", "Einem", "Einer", "Dieser", "Diese", "Dieses", "Diesen", "Jeder", "Jede", "Alle",
    "Viele", "Kein", "Keine", "Und", "Oder", "Aber", "Doch", "Dann", "Danach", "Später", "Jetzt",
    "Nun", "Noch", "Auch", "Schon", "Nicht", "Sehr", "Ganz", "Hier", "Dort", "Da", "Ja", "Nein",
    "Danke", "Bitte", "Am", "Im", "In", "Zum", "Zur", "Mit", "Bei", "Nach", "Von", "Aus", "Auf",
    "Für", "Über", "Unter", "Vor", "Seit", "Bis", "Um", "Als", "Wenn", "Weil", "Dass", "Ob", "Wie",
    "Was", "Wer", "Wo", "Warum", "Wieso", "Weshalb", "Wann", "Welche", "Welcher", "Etwas", "Nichts",
    "Alles", "Jemand", "Niemand", "Endlich", "Leider", "Vielleicht", "Eigentlich",
    "Trotzdem", "Außerdem", "Zuerst", "Zuletzt", "Erst", "Heut", "Gerade", "Immer", "Nie", "Oft",
    "Manchmal", "Wieder", "Fast", "Nur", "Mehr", "Weniger", "Viel", "Wenig", "Gut", "Gute", "Guter",
    "Gutes", "Schön", "Schöne", "Schöner", "Schönes", "Toll", "Super", "Lange", "Langer", "Kurz",
    "Kurze", "Ruhig", "Ruhige", "Ruhiger", "Ruhiges", "Dankbar", "Froh", "Müde", "Traurig",
    "Glücklich", "Entspannt", "Gestresst", "Insgesamt", "Kontaktiere", "Ruf", "Tel",
    "Einfacher", "Einfache", "Text", "Hallo", "Liebe", "Lieber", "Ok", "Okay",
    # Time words (de)
    "Heute", "Gestern", "Morgen", "Vorgestern", "Übermorgen", "Abend", "Abends", "Morgens",
    "Vormittag", "Nachmittag", "Mittag", "Mittags", "Nacht", "Nachts", "Tag", "Tage", "Tages",
    "Woche", "Wochen", "Wochenende", "Monat", "Monate", "Jahr", "Jahre", "Stunde", "Stunden",
    "Minute", "Minuten", "Moment", "Augenblick", "Montag", "Dienstag", "Mittwoch", "Donnerstag",
    "Freitag", "Samstag", "Sonntag", "Januar", "Februar", "März", "April", "Mai", "Juni", "Juli",
    "August", "September", "Oktober", "November", "Dezember", "Frühling", "Sommer", "Herbst",
    "Winter", "Feierabend", "Geburtstag", "Weihnachten", "Ostern", "Silvester", "Ferien",
    # Relatives and roles (de)
    "Direktor", "Manager", "Chef", "Chefin", "Boss", "Vater", "Mutter", "Sohn", "Tochter", "Bruder",
    "Schwester", "Geschwister", "Oma", "Opa", "Onkel", "Tante", "Eltern", "Kinder", "Kind", "Baby",
    "Familie", "Freund", "Freundin", "Freunde", "Freunden", "Kollege", "Kollegin", "Kollegen",
    "Team", "Nachbar", "Nachbarin", "Nachbarn", "Arzt", "Ärztin", "Therapeut", "Therapeutin",
    "Lehrer", "Lehrerin", "Student", "Studentin", "Schüler", "Schülerin", "Kunde", "Kundin",
    "Partner", "Partnerin", "Mann", "Ehemann", "Ehefrau", "Menschen", "Mensch", "Leute", "Hund",
    "Katze",
    # Contact and place nouns (de)
    "Kontakt", "Adresse", "Telefon", "Email", "E-Mail", "Nummer", "Name", "Namen", "Notiz",
    "Notizen", "Nachricht", "Nachrichten", "Anruf", "Brief", "Treffen", "Termin", "Termine",
    "Straße", "Strasse", "Weg", "Platz", "Allee", "Gasse", "Ring", "Haus", "Hause", "Wohnung",
    "Apartment", "Zimmer", "Etage", "Stockwerk", "Gebäude", "Büro", "Firma", "Unternehmen",
    "Geschäft", "Laden", "Supermarkt", "Restaurant", "Café", "Bar", "Hotel", "Pension", "Gasthaus",
    "Krankenhaus", "Klinik", "Praxis", "Schule", "Universität", "Uni", "Hochschule", "Institut",
    "Behörde", "Amt", "Rathaus", "Polizei", "Feuerwehr", "Post", "Bank", "Sparkasse", "Volksbank",
    "Deutsche", "Stadt", "Dorf", "Land", "Park", "Wald", "Garten", "See", "Meer", "Strand",
    "Berge", "Kirche", "Bahn", "Zug", "Auto", "Bus", "Fahrrad", "Arbeit", "Job", "Projekt",
    "Meeting", "Urlaub", "Reise", "Bett", "Küche", "Essen", "Frühstück", "Mittagessen",
    "Abendessen", "Wasser", "Wetter",
    # Wellbeing vocabulary (de)
    "Journal", "Tagebuch", "Dankbarkeit", "Dank", "Atemübung", "Atemübungen", "Atmung", "Atem",
    "Einträge", "Eintrag", "Sessions", "Session", "Meditation", "Yoga", "Sport", "Training",
    "Spaziergang", "Natur", "Ruhe", "Freude", "Glück", "Angst", "Sorgen", "Sorge",
    "Gefühl", "Gefühle", "Gedanken", "Energie", "Kraft", "Zeit", "Zukunft", "Achtsamkeit",
    "Stress", "Schlaf", "Kopfschmerzen", "Gesundheit", "Kaffee", "Tee", "Musik", "Buch", "Film",
    "Sonne", "Sonnenschein", "Regen", "Schnee", "Informationen", "Information", "Daten", "Ziel",
    "Ziele", "Plan", "Pläne", "Idee", "Problem", "Probleme", "Gespräch", "Gespräche", "Hilfe",
    "Unterstützung", "Pause", "Erholung",
    # English
    "The", "An", "And", "Or", "But", "Then", "Today", "Yesterday", "Tomorrow", "Tonight",
    "This", "That", "These", "Those", "My", "Your", "His", "Her", "Our", "Their", "We", "You", "He",
    "She", "They", "It", "Its", "Me", "Us", "On", "At", "To", "For", "Of", "With", "From",
    "After", "Before", "When", "While", "If", "So", "Also", "Just", "Still", "Some", "Many", "Much",
    "Very", "Not", "No", "Yes", "Thanks", "Please", "Had", "Have", "Went", "Felt", "Feeling",
    "Called", "Met", "Grateful", "Good", "Great", "Nice", "Long", "Quiet", "Hello", "Dear",
    "Morning", "Evening", "Night", "Afternoon", "Week", "Weekend", "Month", "Year", "Day", "Time",
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday", "January",
    "February", "March", "June", "July", "October", "December", "Mom", "Dad", "Mother", "Father",
    "Sister", "Brother", "Friend", "Friends", "Family", "Work", "Home", "Street", "Road", "Avenue",
    "Coffee", "Walk", "Lunch", "Dinner", "Breakfast", "Note",
})

_EMAIL = r"(?<![A-Za-z0-9._%+-])[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"
_PHONE = r"(?<![\w+])(?:\+49|0)(?:[ /-]?\d){7,15}(?!\d)"
_WORD = r"(?<![\w-])[A-ZÄÖÜ][a-zäöüß]+(?:-[A-ZÄÖÜ]?[a-zäöüß]+)*(?!\w)"

TOKEN_PATTERN = re.compile(f"(?P<email>{_EMAIL})|(?P<phone>{_PHONE})|(?P<word>{_WORD})")
HOUSE_NUMBER_PATTERN = re.compile(r"[ \t]+\d{1,4}[a-zA-Z]?\b")

Span = Tuple[int, int, str]


class PIIRedactor:
    """
    Deterministic, reversible PII scrubber.

    One left-to-right regex pass finds email, phone and capitalized-word
    tokens. Capitalized words outside COMMON_WORDS are grouped into runs and
    each run becomes one name, unless the word looks like a street.
    """

    def scrub(self, text: str, options: Optional[ScrubOptions] = None) -> RedactionResult:
        """
        Replace detected PII with numbered placeholders.

        Args:
            text: Source text
            options: Optional custom placeholder base tokens

        Returns:
            RedactionResult with scrubbed text and placeholder -> original map
        """
        scrubbed, original_map = self.scrub_many([text], options)
        return RedactionResult(scrubbed_text=scrubbed[0], original_map=original_map)

    def scrub_many(
        self, texts: List[str], options: Optional[ScrubOptions] = None
    ) -> Tuple[List[str], Dict[str, str]]:
        """
        Scrub several independent texts with one shared placeholder sequence.

        Each text is analysed on its own, so runs never span two texts, while
        placeholder numbers keep increasing across them and the single map
        restores any of the results. Numbers whose placeholder already occurs
        literally in the input are skipped.
        """
        placeholders = self._placeholders(options)
        haystack = "\n".join(text for text in texts if text)
        counters: Dict[str, int] = {}
        original_map: Dict[str, str] = {}
        results = []

        for text in texts:
            if not text:
                results.append(text)
                continue
            parts = []
            cursor = 0
            for start, end, category in self._detect(text):
                placeholder = self._next_placeholder(placeholders[category], counters, haystack)
                original_map[placeholder] = text[start:end]
                parts.append(text[cursor:start])
                parts.append(placeholder)
                cursor = end
            parts.append(text[cursor:])
            results.append("".join(parts))

        if original_map:
            logger.debug("PII redacted", placeholders=len(original_map), segments=len(texts))
        return results, original_map

    def unscrub(self, text: str, mapping: Dict[str, str]) -> str:
        """
        Restore placeholders from a mapping. Unmapped placeholders stay as they are.
        """
        if not text or not mapping:
            return text
        # Longest first so [NAME]_1 never matches inside [NAME]_10
        pattern = re.compile("|".join(re.escape(key) for key in sorted(mapping, key=len, reverse=True)))
        return pattern.sub(lambda m: mapping[m.group(0)], text)

    def count_pii(self, text: str) -> Dict[str, int]:
        """Count detections per category, using the same rules as scrub."""
        counts = {category: 0 for category in CATEGORIES}
        if not text:
            return counts
        for _, _, category in self._detect(text):
            counts[category] += 1
        return counts

    def contains_pii(self, text: str) -> bool:
        return any(self.count_pii(text).values())

    # ==================== Detection ====================

    @staticmethod
    def _placeholders(options: Optional[ScrubOptions]) -> Dict[str, str]:
        placeholders = dict(DEFAULT_PLACEHOLDERS)
        if options is not None:
            custom = options.custom_placeholders.model_dump(exclude_none=True)
            placeholders.update(custom)
        return placeholders

    @staticmethod
    def _next_placeholder(base: str, counters: Dict[str, int], haystack: str) -> str:
        # Substring test also skips [NAME]_1 when the input holds [NAME]_12
        n = counters.get(base, 0) + 1
        while f"{base}_{n}" in haystack:
            n += 1
        counters[base] = n
        return f"{base}_{n}"

    def _detect(self, text: str) -> Iterator[Span]:
        """Yield (start, end, category) spans in left-to-right order."""
        run: List[re.Match] = []

        def flush() -> Iterator[Span]:
            if run:
                yield run[0].start(), run[-1].end(), "name"
                run.clear()

        for match in TOKEN_PATTERN.finditer(text):
            kind = match.lastgroup
            if kind != "word":
                yield from flush()
                yield match.start(), match.end(), kind
                continue

            word = match.group()
            if self._is_location(text, match):
                yield from flush()
                yield match.start(), match.end(), "location"
            elif word in COMMON_WORDS:
                yield from flush()
            else:
                if run:
                    gap = text[run[-1].end():match.start()]
                    if not gap.isspace():
                        yield from flush()
                run.append(match)

        yield from flush()

    @staticmethod
    def _is_location(text: str, match: re.Match) -> bool:
        word = match.group()
        lowered = word.lower()
        if "-" in word and lowered.rsplit("-", 1)[1] in STREET_SUFFIXES:
            return True
        if any(lowered.endswith(suffix) and len(lowered) > len(suffix) for suffix in STREET_SUFFIXES):
            return True
        return word not in COMMON_WORDS and HOUSE_NUMBER_PATTERN.match(text, match.end()) is not None


# Singleton instance
pii_redactor = PIIRedactor()
