"""
Morning focus prompts and impulse pools.
"""

MORNING_SYSTEM_PROMPT = {
    "de": """Du bist ein achtsamer Begleiter für den Tagesstart.

Erstelle 2-3 inspirierende Impulse für den Tag basierend auf:
- Gestern Abend (falls verfügbar)
- Generischen Achtsamkeits-Praktiken

Ton: Ermutigend, positiv, ohne Druck. Fokus auf kleine, machbare Schritte.

Platzhalter wie [NAME]_1 stehen für Personen oder Orte. Übernimm sie unverändert.

Format:
🌅 Tagesfokus:
• Impuls 1
• Impuls 2
• Impuls 3 (optional)

💝 Dankbarkeits-Erinnerung: [kurze Erinnerung]""",
    "en": """You are a mindful companion for morning focus.

Create 2-3 inspiring impulses for the day based on:
- Yesterday evening (if available)
- General mindfulness practices

Tone: Encouraging, positive, no pressure. Focus on small, achievable steps.

Placeholders like [NAME]_1 stand for people or places. Keep them unchanged.

Format:
🌅 Daily focus:
• Impulse 1
• Impulse 2
• Impulse 3 (optional)

💝 Gratitude reminder: [short reminder]""",
}

MORNING_USER_PROMPT = {
    "de": """Hier sind deine Daten für den Tagesstart:

{data}

Erstelle 2-3 inspirierende Impulse für heute und eine Dankbarkeits-Erinnerung.""",
    "en": """Here is your data for the day start:

{data}

Create 2-3 inspiring impulses for today and a gratitude reminder.""",
}

MORNING_NO_DATA = {
    "de": "Keine spezifischen Daten verfügbar.",
    "en": "No specific data available.",
}

MORNING_FALLBACK_USER_PROMPT = {
    "de": "Keine spezifischen Daten verfügbar. Erstelle 2-3 allgemeine, inspirierende Impulse für den Tag.",
    "en": "No specific data available. Create 2-3 general, inspiring impulses for the day.",
}

# Pool for PromptComposer.get_random_morning_impulses
MORNING_IMPULSES = {
    "de": [
        "Nimm dir Zeit für eine bewusste Atemübung",
        "Schreibe drei Dinge auf, für die du dankbar bist",
        "Reflektiere über deine Ziele für diese Woche",
        "Mache einen kurzen Spaziergang in der Natur",
        "Praktiziere Achtsamkeit bei deiner ersten Mahlzeit",
        "Setze eine positive Intention für den Tag",
        "Kontaktiere einen lieben Menschen",
    ],
    "en": [
        "Take time for a mindful breathing exercise",
        "Write down three things you are grateful for",
        "Reflect on your goals for this week",
        "Take a short walk in nature",
        "Practice mindfulness during your first meal",
        "Set a positive intention for the day",
        "Reach out to a loved one",
    ],
}

# Candidates for MorningAggregation.today_goals
GENERIC_MORNING_IMPULSES = {
    "de": [
        "Nimm dir heute Zeit für eine bewusste Atemübung",
        "Schreibe drei Dinge auf, für die du dankbar bist",
        "Reflektiere über deine Ziele für diese Woche",
        "Mache einen kurzen Spaziergang in der Natur",
        "Praktiziere Achtsamkeit bei deiner ersten Mahlzeit",
    ],
    "en": [
        "Take time today for a mindful breathing exercise",
        "Write down three things you are grateful for",
        "Reflect on your goals for this week",
        "Take a short walk in nature",
        "Practice mindfulness during your first meal",
    ],
}
