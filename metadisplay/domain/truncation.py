"""Troncature des valeurs affichées (description et champs).

Applique les options `TruncationOptions` stockées dans `description_data["truncation"]` ou dans
`FieldConfig.extra["truncation"]`.
"""

from __future__ import annotations

import re

from metadisplay.domain.display_config import TruncationOptions

ELLIPSIS = "..."

# Espaces et ponctuation considérés comme frontières de mot.
_WORD_BOUNDARY = r"[\s.,;:!?\-–—)\]}/]"


def truncate_text(text: str, options: TruncationOptions) -> str:
    """
    Tronque `text` selon `options`.

    - max_length <= 0 ou texte assez court: texte inchangé.
    - ellipsis: "..." est compté dans max_length, les espaces finaux sont retirés avant l'ajout.
    - word_safe: coupe au dernier séparateur laissant au moins `min_wordsafe_length` caractères,
      sinon coupe franche.
    """
    max_length = options.max_length
    if max_length <= 0 or len(text) <= max_length:
        return text

    ellipsis = ""
    if options.ellipsis:
        ellipsis = ELLIPSIS[:max_length]
        max_length = max(max_length - len(ellipsis), 0)

    min_length = max(options.min_wordsafe_length, 0)
    word_safe = options.word_safe and max_length > min_length

    if word_safe:
        pattern = rf"^(.{{{min_length},{max_length}}}){_WORD_BOUNDARY}"
        match = re.match(pattern, text, flags=re.DOTALL)
        truncated = match.group(1) if match else text[:max_length]
    else:
        truncated = text[:max_length]

    if ellipsis:
        truncated = truncated.rstrip() + ellipsis
    return truncated


def truncate_values(values: list[str], options: TruncationOptions) -> list[str]:
    """Tronque chaque valeur d'un champ multivalué."""
    return [truncate_text(v, options) for v in values]
