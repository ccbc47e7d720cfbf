"""
Locally generated insight texts used when the API is unavailable or over budget.

Every variant uses bullet points and carries a breathing recommendation line.
"""

EVENING_FALLBACKS = {
    "de": [
        "• Heute war ein Tag voller Möglichkeiten und Wachstum\n• Du hast dich um dein Wohlbefinden gekümmert\n• Morgen bringt neue Chancen für Achtsamkeit\n\n💨 Atem-Empfehlung: Box Breathing (4-4-4-4) für Entspannung",
        "• Du hast heute wichtige Schritte in deiner Achtsamkeits-Reise gemacht\n• Jeder Moment ist eine Gelegenheit zur Reflexion\n• Deine Bemühungen sind wertvoll und bedeutsam\n\n💨 Atem-Empfehlung: 4-7-8 Atmung für besseren Schlaf",
        "• Heute hast du dich um deine mentale Gesundheit gekümmert\n• Kleine Fortschritte sind große Erfolge\n• Du bist auf dem richtigen Weg\n\n💨 Atem-Empfehlung: Coherent Breathing (5-5) für Balance",
    ],
    "en": [
        "• Today was filled with opportunities for growth\n• You took care of your well-being\n• Tomorrow brings new chances for mindfulness\n\n💨 Breathing recommendation: Box Breathing (4-4-4-4) for relaxation",
        "• You made important steps in your mindfulness journey today\n• Every moment is an opportunity for reflection\n• Your efforts are valuable and meaningful\n\n💨 Breathing recommendation: 4-7-8 breathing for better sleep",
        "• Today you cared for your mental health\n• Small progress is great success\n• You are on the right path\n\n💨 Breathing recommendation: Coherent breathing (5-5) for balance",
    ],
}

MORNING_FALLBACKS = {
    "de": [
        "🌅 Tagesfokus:\n• Nimm dir Zeit für eine bewusste Atemübung\n• Schreibe drei Dinge auf, für die du dankbar bist\n• Reflektiere über deine Ziele für diese Woche\n\n💨 Atem-Empfehlung: Coherent Breathing (5-5) für einen ruhigen Start\n\n💝 Dankbarkeits-Erinnerung: Jeder Tag ist ein Geschenk - beginne ihn mit Achtsamkeit.",
        "🌅 Tagesfokus:\n• Mache einen kurzen Spaziergang in der Natur\n• Praktiziere Achtsamkeit bei deiner ersten Mahlzeit\n• Setze eine positive Intention für den Tag\n\n💨 Atem-Empfehlung: Box Breathing (4-4-4-4) für Klarheit\n\n💝 Dankbarkeits-Erinnerung: Du hast die Kraft, deinen Tag bewusst zu gestalten.",
        "🌅 Tagesfokus:\n• Kontaktiere einen lieben Menschen\n• Reflektiere über deine Ziele für diese Woche\n• Nimm dir Zeit für eine bewusste Atemübung\n\n💨 Atem-Empfehlung: Triangle Breathing für Fokus\n\n💝 Dankbarkeits-Erinnerung: Jeder neue Tag ist eine Chance für Wachstum und Freude.",
    ],
    "en": [
        "🌅 Daily focus:\n• Take time for a mindful breathing exercise\n• Write down three things you are grateful for\n• Reflect on your goals for this week\n\n💨 Breathing recommendation: Coherent breathing (5-5) for a calm start\n\n💝 Gratitude reminder: Every day is a gift - start it with mindfulness.",
        "🌅 Daily focus:\n• Take a short walk in nature\n• Practice mindfulness during your first meal\n• Set a positive intention for the day\n\n💨 Breathing recommendation: Box Breathing (4-4-4-4) for clarity\n\n💝 Gratitude reminder: You have the power to shape your day consciously.",
        "🌅 Daily focus:\n• Reach out to a loved one\n• Reflect on your goals for this week\n• Take time for a mindful breathing exercise\n\n💨 Breathing recommendation: Triangle breathing for focus\n\n💝 Gratitude reminder: Every new day is a chance for growth and joy.",
    ],
}

FALLBACKS = {
    "evening": EVENING_FALLBACKS,
    "morning": MORNING_FALLBACKS,
}
