from __future__ import annotations

from bs4 import BeautifulSoup

from nova_extract.sanitize import (
    DEFAULT_CONTENT_SELECTOR,
    content_selector,
    normalize_centering,
    parse_chapter,
    remove_ad_blocks,
    sanitize_chapter_html,
)

from conftest import FakeHttp

NAZARICK = "Nadie entra sin permiso en la Gran Tumba de Nazarick"


def _wrapped(inner: str, *, extra: str = "") -> str:
    return (
        "<html><head><title>Capítulo 1</title></head><body>"
        f"{extra}"
        '<div class="wpb_text_column wpb_content_element">'
        f'<div class="wpb_wrapper">{inner}</div></div>'
        "</body></html>"
    )


def test_content_selector_uses_fingerprint():
    assert content_selector(f"<p>{NAZARICK}</p>") == "#content"
    assert content_selector("<p>Otra novela</p>") == DEFAULT_CONTENT_SELECTOR


def test_default_template_container():
    html = _wrapped(
        '<p>Hola</p><center><ins class="adsbygoogle"></ins></center>'
        '<p style="text-align: center">Fin</p>'
    )

    assert sanitize_chapter_html(html) == "<p>Hola</p><center>Fin</center>"


def test_fingerprinted_template_uses_content_id():
    html = (
        "<html><body>"
        f'<div id="content"><p>{NAZARICK}</p><center>ad</center></div>'
        '<div class="wpb_text_column wpb_content_element">'
        '<div class="wpb_wrapper"><p>menú</p></div></div>'
        "</body></html>"
    )

    assert sanitize_chapter_html(html) == f"<p>{NAZARICK}</p>"


def test_missing_container_gives_empty_string():
    assert sanitize_chapter_html("<html><body><p>nada</p></body></html>") == ""


def test_ads_inside_centered_elements_are_removed_not_preserved():
    html = _wrapped(
        '<div style="TEXT-ALIGN:CENTER"><p>Sigue</p><center>publicidad</center></div>'
    )

    assert sanitize_chapter_html(html) == "<center><p>Sigue</p></center>"


def test_centering_drops_tag_and_attributes():
    html = _wrapped(
        '<p class="x" id="y" style="font-weight: bold; text-align: center;">'
        "<em>***</em></p>"
        '<p style="text-align: left">izquierda</p>'
    )

    assert sanitize_chapter_html(html) == (
        '<center><em>***</em></center><p style="text-align: left">izquierda</p>'
    )


def test_nested_centered_elements_are_all_rewritten():
    html = _wrapped(
        '<div style="text-align:center"><span style="text-align: center">x</span></div>'
    )

    assert sanitize_chapter_html(html) == "<center><center>x</center></center>"


def test_normalize_centering_is_idempotent():
    soup = BeautifulSoup(
        '<div style="text-align:center"><p style="text-align: center">a</p></div>'
        "<center>b</center><p>c</p>",
        "html.parser",
    )

    assert normalize_centering(soup) == 2
    once = soup.decode()

    assert normalize_centering(soup) == 0
    assert soup.decode() == once


def test_remove_ad_blocks_handles_nested_centers():
    soup = BeautifulSoup(
        "<div><center>a<center>b</center></center><center>c</center></div>",
        "html.parser",
    )

    assert remove_ad_blocks(soup) == 2
    assert soup.decode() == "<div></div>"


def test_parse_chapter_fetches_absolute_url():
    http = FakeHttp(default=_wrapped("<p>Hola</p>"))

    assert parse_chapter(http, "/index.php/2020/01/01/cap-1/") == "<p>Hola</p>"
    assert http.calls == [
        ("GET", "https://novelasligeras.net/index.php/2020/01/01/cap-1/", None)
    ]
