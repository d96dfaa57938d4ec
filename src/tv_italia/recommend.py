"""Channel recommendations from a text-generation model."""

import json
import logging
from typing import List, NamedTuple, Sequence

import requests

from .channel import Channel
from .config import config

logger = logging.getLogger(__name__)

GENERATE_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

APOLOGY_TEXT = (
    "Mi dispiace, al momento non riesco a connettermi al cervello digitale. "
    "Ecco tutti i canali."
)
NO_MATCH_TEXT = (
    "Non sono riuscito a trovare un suggerimento specifico, ma ecco la lista dei canali!"
)

PROMPT = """
Sei un esperto assistente TV per un'app di streaming italiana.
L'utente vuole sapere cosa guardare.
Ecco la lista dei canali disponibili:
{channels}

Domanda utente: "{query}"

Rispondi in italiano. Sii amichevole e breve.
Suggerisci 1-3 canali dalla lista fornita che meglio si adattano alla richiesta.
Se la richiesta non è chiara, suggerisci canali popolari (News o Musica).
"""

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "responseText": {
            "type": "STRING",
            "description": "Il testo della risposta da mostrare all'utente.",
        },
        "recommendedIds": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "Array degli ID dei canali raccomandati.",
        },
    },
    "required": ["responseText", "recommendedIds"],
}


class Recommendation(NamedTuple):
    text: str
    channel_ids: List[str]


def build_prompt(query: str, channels: Sequence[Channel]) -> str:
    context = "\n".join(
        f"ID: {c.id}, Name: {c.name}, Category: {c.category.value}, Desc: {c.description}"
        for c in channels
    )
    return PROMPT.format(channels=context, query=query)


def recommend(query: str, channels: Sequence[Channel]) -> Recommendation:
    """Ask the model which channels fit ``query``.

    Never raises: a missing API key or any failure gives the apology text
    and no ids. Ids that are not in ``channels`` are dropped.
    """
    if not config.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY not set, recommendations unavailable")
        return Recommendation(APOLOGY_TEXT, [])

    try:
        response = requests.post(
            GENERATE_URL.format(model=config.GEMINI_MODEL),
            params={"key": config.GEMINI_API_KEY},
            json={
                "contents": [{"parts": [{"text": build_prompt(query, channels)}]}],
                "generationConfig": {
                    "responseMimeType": "application/json",
                    "responseSchema": RESPONSE_SCHEMA,
                },
            },
            timeout=config.HTTP_TIMEOUT,
        )
        response.raise_for_status()

        data = response.json()
        text = data["candidates"][0]["content"]["parts"][0]["text"]
        result = json.loads(text or "{}")

        known_ids = {channel.id for channel in channels}
        ids = [channel_id for channel_id in result.get("recommendedIds") or [] if channel_id in known_ids]
        return Recommendation(result.get("responseText") or NO_MATCH_TEXT, ids)

    except Exception as e:
        logger.error(f"Recommendation request failed: {e}")
        return Recommendation(APOLOGY_TEXT, [])
