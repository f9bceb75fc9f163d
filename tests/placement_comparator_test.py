import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from core.html_parser import HTMLParser, extract
from core.page_snapshot import Element, Heading, PageSnapshot, PageStructure, Paragraph
from core.placement_comparator import (
    PlacementComparator,
    compare_tag_distribution,
    count_ratio,
    count_similarity,
    entities_match,
    style_mismatches,
)

GOLDEN_HTML = '<title>Hi</title><h1>Welcome</h1><p>Short text here</p>'


def elements(*tags):
    return [Element(tag=tag, text='text') for tag in tags]


def test_identical_pages_score_100():
    html = '<h1>Title</h1><h2>Sub</h2><p>Body copy</p><img src="x.png"><ul><li>One</li></ul>'
    score, breakdown = PlacementComparator().compare_with_breakdown(extract(html, 'a'), extract(html, 'b'))
    assert score == 100
    assert set(breakdown.values()) == {100}


def test_empty_snapshots_score_100_everywhere():
    score, breakdown = PlacementComparator().compare_with_breakdown(PageSnapshot(url='a'), PageSnapshot(url='b'))
    assert score == 100
    assert breakdown == {'positioning': 100, 'layout': 100, 'hierarchy': 100, 'styling': 100}


def test_golden_page_against_empty_page():
    score, breakdown = PlacementComparator().compare_with_breakdown(extract(GOLDEN_HTML, 'a'), extract('', 'b'))
    assert breakdown['positioning'] == 0
    assert breakdown['hierarchy'] == 0
    # links, images and lists are empty on both sides
    assert breakdown['layout'] == 55
    assert breakdown['styling'] == 100
    assert score == 29


def test_element_positioning_uses_tag_distribution_and_count():
    comp = PlacementComparator()
    assert comp.compare_element_positioning([], []) == 100
    assert comp.compare_element_positioning(elements('p'), []) == 0
    # tag distribution 50, count 100
    assert comp.compare_element_positioning(elements('p', 'p', 'h1'), elements('p', 'h1', 'h1')) == 65


def test_tag_distribution():
    assert compare_tag_distribution([], []) == 100
    assert compare_tag_distribution(['p'], []) == 0
    assert compare_tag_distribution(['p', 'p', 'h1'], ['p', 'h1', 'h1']) == 50
    # p matches, span missing on one side
    assert compare_tag_distribution(['p', 'span'], ['p']) == 50


MIXED_COUNTS = [('p', 5, 4), ('h2', 3, 6), ('li', 4, 1), ('span', 6, 1), ('a', 5, 1), ('td', 6, 2)]


def tag_lists(counts):
    tags1 = [tag for tag, count, _ in counts for _ in range(count)]
    tags2 = [tag for tag, _, count in counts for _ in range(count)]
    return tags1, tags2


def test_tag_distribution_mixed_counts():
    # mean relative difference is exactly 0.625, so 37.5 rounds up
    tags1, tags2 = tag_lists(MIXED_COUNTS)
    assert compare_tag_distribution(tags1, tags2) == 38


@pytest.mark.parametrize('order', [
    [0, 1, 2, 3, 4, 5],
    [5, 4, 3, 2, 1, 0],
    [3, 5, 0, 4, 1, 2],
    [1, 2, 0, 4, 5, 3],
    [4, 0, 5, 1, 3, 2],
])
def test_tag_distribution_ignores_tag_order(order):
    counts = [MIXED_COUNTS[i] for i in order]
    tags1, tags2 = tag_lists(counts)
    assert compare_tag_distribution(tags1, tags2) == 38
    assert compare_tag_distribution(tags1[::-1], sorted(tags2)) == 38


def test_count_helpers():
    assert count_similarity(0, 0) == 100
    assert count_similarity(3, 4) == 75
    assert count_similarity(0, 5) == 0
    assert count_ratio(0, 0) == 1.0
    assert count_ratio(0, 2) == 0.0
    assert count_ratio(2, 4) == 0.5


def test_layout_ratio():
    comp = PlacementComparator()
    structure1 = PageStructure(headings=(Heading(level=1, text='a'),))
    structure2 = PageStructure(headings=tuple(Heading(level=1, text='a') for _ in range(4)))
    # heading ratio 0.25 weighted 0.25, every other category empty on both sides
    assert comp.compare_layout_structure(structure1, structure2) == 81


def test_visual_hierarchy_is_asymmetric():
    comp = PlacementComparator()
    structure1 = PageStructure(headings=(Heading(level=1, text='a'), Heading(level=2, text='b')))
    structure2 = PageStructure(headings=(Heading(level=2, text='c'),))
    assert comp.compare_visual_hierarchy(structure1, structure2) == 90
    assert comp.compare_visual_hierarchy(structure2, structure1) == 100


def test_entities_without_class_or_id_never_match():
    assert not entities_match(Paragraph(text='a'), Paragraph(text='a'))
    assert not entities_match(Paragraph(class_name=''), Paragraph(class_name=''))
    assert entities_match(Paragraph(class_name='intro'), Paragraph(class_name='intro'))
    assert entities_match(Paragraph(element_id='p1'), Paragraph(class_name='x', element_id='p1'))


def test_style_mismatches():
    assert style_mismatches(None, None) == 0
    assert style_mismatches('MARGIN: 0', 'margin: 4px') == 0
    assert style_mismatches('margin: 0; padding: 1px', 'margin: 0') == 1
    assert style_mismatches('display: flex', '') == 2


def test_styling_differences_over_paired_entities():
    comp = PlacementComparator()
    structure1 = PageStructure(
        headings=(Heading(level=1, text='a', element_id='top', style='margin: 0'),),
        paragraphs=(Paragraph(text='b', class_name='intro', style='margin: 0; padding: 1px'),),
    )
    structure2 = PageStructure(
        headings=(Heading(level=2, text='c', element_id='top', style='margin: 2px'),),
        paragraphs=(Paragraph(text='d', class_name='intro', style='margin: 0'),),
    )
    # one mismatch over two pairs
    assert comp.analyze_styling_differences(structure1, structure2) == 50


def test_styling_without_pairs_scores_100():
    comp = PlacementComparator()
    html1 = '<p style="margin: 0">Styled paragraph</p>'
    html2 = '<p>Plain paragraph</p>'
    assert comp.analyze_styling_differences(extract(html1, 'a').structure, extract(html2, 'b').structure) == 100


def test_styling_with_resolved_attributes():
    parser = HTMLParser(resolve_attributes=True)
    html1 = '<p class="lead" style="display: flex; margin: 0">Lead paragraph</p>'
    html2 = '<p class="lead">Lead paragraph</p>'
    structure1 = parser.extract(html1, 'a').structure
    structure2 = parser.extract(html2, 'b').structure
    # flex, display and margin differ on the single pair
    assert PlacementComparator().analyze_styling_differences(structure1, structure2) == 0


@pytest.mark.parametrize('html1, html2', [
    (GOLDEN_HTML, ''),
    ('', GOLDEN_HTML),
    ('<h6>Deep</h6><p>Text</p>', '<h1>Top</h1>'),
])
def test_score_stays_in_range(html1, html2):
    score = PlacementComparator().compare(extract(html1, 'a'), extract(html2, 'b'))
    assert 0 <= score <= 100
