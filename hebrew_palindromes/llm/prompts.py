"""Prompt templates for AI palindrome discovery and source identification.

Both prompts instruct the model to answer with a single JSON object only; the
expected shapes are parsed in `response_parsing`.
"""

from __future__ import annotations


_EXPERT_PREAMBLE = "אתה מומחה לתנ\"ך העברי."


class PromptLibrary:
    """Build prompt strings for supported AI tasks."""

    def discovery_prompt(self, user_prompt: str | None = None) -> str:
        """Return the prompt asking for 5-10 palindromes found in the Tanakh."""

        guidance = ""
        if user_prompt is not None and user_prompt.strip():
            guidance = f"הנחיה מהמשתמש: {user_prompt.strip()}\n\n"

        return (
            f"{_EXPERT_PREAMBLE} תפקידך למצוא פלינדרומים (מילים או ביטויים הנקראים "
            "זהה קדימה ואחורה) בתנ\"ך.\n\n"
            f"{guidance}"
            "מצא 5-10 פלינדרומים מעניינים מהתנ\"ך. לכל פלינדרום, ספק:\n"
            "1. הטקסט המדויק\n"
            "2. המיקום (ספר, פרק, פסוק)\n"
            "3. משמעות או הקשר (אופציונלי)\n\n"
            "החזר את התשובה בפורמט JSON הבא בלבד, ללא טקסט נוסף:\n"
            "{\n"
            '  "palindromes": [\n'
            "    {\n"
            '      "text": "אבא",\n'
            '      "book": "בראשית",\n'
            '      "chapter": "לב",\n'
            '      "verse": "יא",\n'
            '      "meaning": "הופעת המילה \'אבא\' בהקשר משפחתי"\n'
            "    }\n"
            "  ]\n"
            "}\n\n"
            "חשוב: החזר רק JSON תקין, ללא הסברים או טקסט נוסף."
        )

    def source_prompt(self, text: str) -> str:
        """Return the prompt asking for the exact biblical location of `text`."""

        return (
            f"{_EXPERT_PREAMBLE} זהה את המקור המדויק של הטקסט הבא:\n\n"
            f'"{text.strip()}"\n\n'
            "אם הטקסט מופיע בתנ\"ך, החזר JSON במבנה הבא:\n"
            "{\n"
            '  "found": true,\n'
            '  "book": "שם הספר",\n'
            '  "chapter": "מספר הפרק",\n'
            '  "verse": "מספר הפסוק",\n'
            '  "confidence": 0.95\n'
            "}\n\n"
            "אם הטקסט לא נמצא או שאתה לא בטוח, החזר:\n"
            "{\n"
            '  "found": false,\n'
            '  "book": "",\n'
            '  "chapter": "",\n'
            '  "verse": "",\n'
            '  "confidence": 0.0\n'
            "}\n\n"
            "החזר רק JSON תקין, ללא הסברים."
        )
