from __future__ import annotations

import re

from qtcluster import Point, get_clusters
from qtcluster.render import REPRESENTATIVE_COLOR, assign_colors, build_render_payload, render_html, render_svg


def _lookup():
    return get_clusters([Point(0, 0), Point(1, 0), Point(10, 10), Point(300, 200)], 2)


def test_assign_colors_is_seeded_and_within_channel_ranges():
    lookup = _lookup()

    colors = assign_colors(lookup)

    assert list(colors) == list(lookup.keys())
    assert colors == assign_colors(lookup)
    for color in colors.values():
        red, green, blue = (int(color[i : i + 2], 16) for i in (1, 3, 5))
        assert 70 <= red < 200
        assert 100 <= green < 225
        assert 100 <= blue < 230


def test_render_svg_draws_members_and_representatives():
    lookup = _lookup()

    svg = render_svg(lookup, width=640, height=480)

    assert svg.startswith("<svg")
    assert 'width="640"' in svg
    assert svg.count("<circle") == 4
    assert svg.count('class="representative"') == len(lookup.keys())
    assert f'fill="{REPRESENTATIVE_COLOR}"' in svg
    assert '<circle cx="5" cy="5" r="5"' in svg
    assert '<rect class="representative" x="300" y="200"' in svg


def test_render_html_lists_every_cluster():
    lookup = _lookup()

    html = render_html(lookup, title="Demo <run>")

    assert "<h1>Demo &lt;run&gt;</h1>" in html
    assert len(re.findall(r"<li ", html)) == len(lookup)
    assert "cluster-001: 2 points around (0, 0)" in html


def test_render_empty_lookup():
    lookup = get_clusters([], 1)

    assert "<circle" not in render_svg(lookup)
    assert "<li>None</li>" in render_html(lookup)
    assert build_render_payload(lookup)["clusters"] == []


def test_render_payload_carries_colours_and_members():
    lookup = _lookup()

    payload = build_render_payload(lookup)

    assert payload["representative_color"] == REPRESENTATIVE_COLOR
    first = payload["clusters"][0]
    assert first["cluster_id"] == "cluster-001"
    assert first["representative"] == [0, 0]
    assert first["members"] == [[0, 0], [1, 0]]
    assert first["color"] == assign_colors(lookup)[Point(0, 0)]
