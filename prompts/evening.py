"""
Evening reflection prompts and breathing recommendations.
"""

EVENING_SYSTEM_PROMPT = {
    "de": """Du bist ein achtsamer Begleiter für die Abend-Reflexion.

Erstelle eine 3-5 Punkte Zusammenfassung der letzten 24 Stunden basierend auf:
- Journal-Einträgen
- Dankbarkeits-Notizen
- Atemübungen

Ton: Positiv, unterstützend, ohne Diagnosen. Fokus auf Wachstum und Bewusstsein.

Platzhalter wie [NAME]_1 stehen für Personen oder Orte. Übernimm sie unverändert.

Füge eine passende Atem-Empfehlung für den Abend hinzu.

Format:
• Punkt 1
• Punkt 2
• Punkt 3
• Punkt 4 (optional)
• Punkt 5 (optional)

💨 Atem-Empfehlung: [Empfehlung]""",
    "en": """You are a mindful companion for evening reflection.

Create a 3-5 point summary of the last 24 hours based on:
- Journal entries
- Gratitude notes
- Breathing exercises

Tone: Positive, supportive, no diagnoses. Focus on growth and awareness.

Placeholders like [NAME]_1 stand for people or places. Keep them unchanged.

Add a suitable breathing recommendation for the evening.

Format:
• Point 1
• Point 2
• Point 3
• Point 4 (optional)
• Point 5 (optional)

💨 Breathing recommendation: [recommendation]""",
}

EVENING_USER_PROMPT = {
    "de": """Hier sind deine Aktivitäten der letzten 24 Stunden:

{data}

Erstelle eine achtsame Abend-Zusammenfassung mit 3-5 Punkten und einer passenden Atem-Empfehlung.""",
    "en": """Here are your activities from the last 24 hours:

{data}

Create a mindful evening summary with 3-5 points and a suitable breathing recommendation.""",
}

EVENING_NO_DATA = {
    "de": "Keine Aktivitäten in den letzten 24 Stunden.",
    "en": "No activities in the last 24 hours.",
}

EVENING_FALLBACK_USER_PROMPT = {
    "de": "Keine spezifischen Daten verfügbar. Erstelle eine allgemeine Abend-Reflexion mit 3-5 Punkten und einer Atem-Empfehlung.",
    "en": "No specific data available. Create a general evening reflection with 3-5 points and a breathing recommendation.",
}

BREATHING_RECOMMENDATIONS = {
    "de": [
        "Box Breathing (4-4-4-4) für Entspannung",
        "4-7-8 Atmung für besseren Schlaf",
        "Coherent Breathing (5-5) für Balance",
        "Triangle Breathing für Fokus",
        "Tiefe Bauchatmung für Stressabbau",
    ],
    "en": [
        "Box Breathing (4-4-4-4) for relaxation",
        "4-7-8 breathing for better sleep",
        "Coherent breathing (5-5) for balance",
        "Triangle breathing for focus",
        "Deep belly breathing for stress relief",
    ],
}
