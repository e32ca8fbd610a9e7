"""
Short user-facing notes attached to scan outcomes, in the request language.
"""
from typing import Dict

from halalscan.llm_advisor import resolve_language

_NOTES: Dict[str, Dict[str, str]] = {
    "advisor_failed": {
        "en": "AI analysis failed. Showing database results.",
        "ru": "Не удалось выполнить AI-анализ. Показаны данные из базы.",
        "ar": "فشل تحليل الذكاء الاصطناعي. يتم عرض نتائج قاعدة البيانات.",
    },
    "no_results": {
        "en": "No results found for this product.",
        "ru": "По этому продукту ничего не найдено.",
        "ar": "لم يتم العثور على نتائج لهذا المنتج.",
    },
    "no_results_advisor_failed": {
        "en": "No results found. AI analysis is unavailable right now.",
        "ru": "Ничего не найдено. AI-анализ сейчас недоступен.",
        "ar": "لم يتم العثور على نتائج. تحليل الذكاء الاصطناعي غير متاح حاليا.",
    },
}


def compose_note(key: str, language: str) -> str:
    texts = _NOTES[key]
    return texts.get(resolve_language(language), texts["en"])
