# ability_gen.py
"""
Gerador de texto de habilidades (chat completions da OpenAI).

``handle_generate_request`` mantém o contrato do endpoint da versão web:
devolve (status, payload) e nunca levanta. ``generate_ability_text`` é o
atalho usado pela UI: lê a chave/modelo da configuração e levanta
``AbilityGenerationError`` em qualquer status != 200.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple

import requests

from shadow_fruit import config
from shadow_fruit.logger import get_logger

log = get_logger("ai")

SYSTEM_PROMPT = (
    "You are an expert One Piece + D&D homebrew designer. You create powerful but "
    "playable shadow abilities with cool names and clear mechanics."
)
TEMPERATURE = 0.85
MAX_TOKENS = 900
REQUEST_TIMEOUT = 60
NO_CONTENT_TEXT = "No content returned from the AI model."
MISSING_KEY_ERROR = "Missing OPENAI_API_KEY in environment variables."

PROMPT_TEMPLATE = """
You are helping design powerful but playable One Piece-style shadow abilities for a D&D-like campaign.

Current Shadow Fruit state:

Total ASP: {total}
Spent ASP: {spent}
Available ASP: {available}

Shadows:
{shadows}

Selected buffs (IDs or names): {buffs}

Extra notes / theme from user:
{notes}

TASK:
1. Propose 3–5 unique, named shadow techniques (attacks or utility), using cool One Piece-style names.
   - For each, give: Name, Short description, Suggested damage dice or mechanical effect, and any save/DC if relevant.
2. Propose 1–3 transformation forms that fit the current level of power (based on ASP and shadows).
   - Briefly describe the form, what changes visually, and what it mechanically boosts.
3. Propose 1–2 special abilities for reanimated corpses powered by these shadows.
   - Make them flavorful and tied to the idea that the corpse has physical durability plus shadow-based powers.

Output in a clean, game-usable text format, with clear headings and bullet points. Avoid referencing D&D rules directly by name (no "CR"), but it's okay to use generic terms like "attack roll", "saving throw", "DC", and "action".
"""


class AbilityGenerationError(RuntimeError):
    """Falha na geração; ``payload`` é o corpo de erro do handler."""

    def __init__(self, status: int, payload: Dict[str, Any]):
        self.status = status
        self.payload = payload
        message = payload.get("error", "Unknown error")
        if payload.get("details"):
            message = f"{message}: {payload['details']}"
        super().__init__(message)


def _shadow_line(s: Dict[str, Any]) -> str:
    return (
        f"Name: {s.get('name') or '(Unnamed)'} | SL {s.get('shadowLevel')} | "
        f"Raw Might {s.get('rawMight')} | Template: {s.get('ttLabel')} | "
        f"Active: {'Yes' if s.get('active') else 'No'}"
    )


def build_prompt(body: Dict[str, Any]) -> str:
    shadows = body.get("shadows")
    if isinstance(shadows, list) and shadows:
        shadow_text = "\n".join(_shadow_line(s) for s in shadows if isinstance(s, dict))
    else:
        shadow_text = "No shadows currently stored."

    buff_ids = body.get("selectedBuffIds")
    if isinstance(buff_ids, list) and buff_ids:
        buffs_text = ", ".join(str(b) for b in buff_ids)
    else:
        buffs_text = "No active buffs."

    return PROMPT_TEMPLATE.format(
        total=body.get("totalAsp"),
        spent=body.get("spentAsp"),
        available=body.get("availableAsp"),
        shadows=shadow_text,
        buffs=buffs_text,
        notes=body.get("notes") or "(none)",
    )


def build_chat_request(body: Dict[str, Any], model: str) -> Dict[str, Any]:
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_prompt(body)},
        ],
        "temperature": TEMPERATURE,
        "max_tokens": MAX_TOKENS,
    }


def _extract_text(data: Any) -> str:
    try:
        text = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return NO_CONTENT_TEXT
    return text or NO_CONTENT_TEXT


def handle_generate_request(
    method: str,
    body: Optional[Dict[str, Any]],
    api_key: Optional[str],
    model: str = config.DEFAULT_MODEL,
    post: Optional[Callable[..., Any]] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> Tuple[int, Dict[str, Any]]:
    if (method or "").upper() != "POST":
        return 405, {"error": "Method not allowed"}
    if not api_key:
        return 500, {"error": MISSING_KEY_ERROR}

    post = post or requests.post
    try:
        resp = post(
            config.OPENAI_CHAT_URL,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
            json=build_chat_request(body or {}, model),
            timeout=timeout,
        )
        if not resp.ok:
            log.error("OpenAI error %s: %s", resp.status_code, resp.text)
            return 500, {"error": "OpenAI API error", "details": resp.text}
        return 200, {"text": _extract_text(resp.json())}
    except Exception as exc:
        log.exception("Ability generation failed")
        return 500, {"error": "Internal server error", "details": str(exc)}


def generate_ability_text(body: Dict[str, Any]) -> str:
    status, payload = handle_generate_request(
        "POST",
        body,
        api_key=config.openai_api_key(),
        model=config.openai_model(),
    )
    if status != 200:
        raise AbilityGenerationError(status, payload)
    log.info("Ability text generated (%d chars)", len(payload["text"]))
    return payload["text"]
