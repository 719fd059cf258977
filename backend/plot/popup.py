from __future__ import annotations

from html import escape
from typing import Any

PHOTO_FIELD = "Foto"
TITLE_FIELDS: tuple[str, ...] = ("Comunidad", "Beneficiar", "Municipio")


def popup_title(layer_name: str, props: dict[str, Any] | None) -> str:
    p = props or {}
    for key in TITLE_FIELDS:
        val = p.get(key)
        if val:
            return str(val)
    return layer_name


def popup_html(layer_name: str, props: dict[str, Any] | None) -> str:
    """
    Full popup body: every attribute except the photo reference, then the photo.
    """
    p = props or {}
    rows = "".join(
        f"<div><em>{escape(str(k))}</em>: {escape(str(v))}</div>"
        for k, v in p.items()
        if k != PHOTO_FIELD
    )
    html = f"<strong>{escape(popup_title(layer_name, p))}</strong><br/>{rows}"

    photo = p.get(PHOTO_FIELD)
    if photo:
        html += (
            f'<div><img src="{escape(str(photo), quote=True)}" alt="Foto de inversión" '
            'style="max-width:200px; margin-top:5px; border:1px solid #ccc"/></div>'
        )
    return html


def hover_text(layer_name: str, props: dict[str, Any] | None) -> str:
    # Plotly hover labels only understand a handful of inline tags.
    p = props or {}
    lines = [f"<b>{escape(popup_title(layer_name, p))}</b>"]
    lines.extend(
        f"<i>{escape(str(k))}</i>: {escape(str(v))}" for k, v in p.items() if k != PHOTO_FIELD
    )
    return "<br>".join(lines)


def format_lat_lng(lat: float, lon: float) -> str:
    return f"{lat:.5f}, {lon:.5f}"
