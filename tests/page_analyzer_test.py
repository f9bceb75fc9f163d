import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from core.fetcher import FetchError
from core.page_analyzer import PageAnalyzer, PageComparison, validate_threshold
from core.page_snapshot import PageSnapshot

GOLDEN_HTML = '<title>Hi</title><h1>Welcome</h1><p>Short text here</p>'

PAGE_HTML = """
<html>
<head><title>Products</title><meta name="description" content="All products"></head>
<body>
    <header>Site header</header>
    <h1>Products</h1>
    <h2>Featured</h2>
    <p>Our most popular products this season.</p>
    <ul><li>Widget</li><li>Gadget</li></ul>
    <img src="hero.png" alt="Hero">
    <a href="/cart">View cart</a>
</body>
</html>
"""


class StubFetcher:
    def __init__(self, pages=None, error=None):
        self.pages = pages or {}
        self.error = error
        self.calls = []

    def fetch_pair(self, pre_go_live_url, current_url):
        self.calls.append((pre_go_live_url, current_url))
        if self.error:
            raise self.error
        return self.pages[pre_go_live_url], self.pages[current_url]


def test_identical_documents_score_100():
    analyzer = PageAnalyzer()
    result = analyzer.compare_html(PAGE_HTML, PAGE_HTML, 'https://new.example.com', 'https://example.com')
    assert result.overall_score == 100
    assert result.content_score == 100
    assert result.placement_score == 100
    assert result.passes(100)


def test_golden_document_against_empty_document():
    result = PageAnalyzer().compare_html(GOLDEN_HTML, '', 'a', 'b')
    assert result.content_score == 26
    assert result.placement_score == 29
    assert result.overall_score == 27
    assert result.content_score < 100
    assert result.placement_score < 100


def test_empty_snapshots_score_100():
    result = PageAnalyzer().compare(PageSnapshot(url='a'), PageSnapshot(url='b'))
    assert result.overall_score == 100
    assert set(result.content_breakdown.values()) == {100}
    assert set(result.placement_breakdown.values()) == {100}


def test_threshold_boundary_passes():
    result = PageComparison(overall_score=75, content_score=75, placement_score=75, details='')
    assert result.passes(75)
    assert not result.passes(76)
    assert result.passes(0)


@pytest.mark.parametrize('value, expected', [(0, 0), (100, 100), ('80', 80), (' 55 ', 55)])
def test_validate_threshold_accepts_range(value, expected):
    assert validate_threshold(value) == expected


@pytest.mark.parametrize('value', [-1, 101, 'abc', '', None, '12.5'])
def test_validate_threshold_rejects_invalid(value):
    with pytest.raises(ValueError):
        validate_threshold(value)


def test_details_listing():
    result = PageAnalyzer().compare_html(GOLDEN_HTML, '', 'https://new', 'https://old')
    assert result.details.split('\n') == [
        'Pre-Go-Live URL: https://new',
        'Current URL: https://old',
        'Pre-Go-Live Title: Hi',
        'Current Title: ',
        'Pre-Go-Live Elements: 3',
        'Current Elements: 0',
        'Pre-Go-Live Text Blocks: 2',
        'Current Text Blocks: 0',
    ]


def test_compare_urls_reports_progress():
    fetcher = StubFetcher(pages={'https://new': PAGE_HTML, 'https://old': PAGE_HTML})
    analyzer = PageAnalyzer(fetcher=fetcher)
    progress = []
    result = analyzer.compare_urls('https://new', 'https://old', 90, on_progress=progress.append)
    assert progress == [10, 50, 100]
    assert fetcher.calls == [('https://new', 'https://old')]
    assert result.overall_score == 100
    assert result.pre_go_live.url == 'https://new'
    assert result.current.url == 'https://old'


def test_compare_urls_fetch_failure_aborts_before_extraction():
    fetcher = StubFetcher(error=FetchError('https://old', 'HTTP 404: Not Found', status_code=404))
    analyzer = PageAnalyzer(fetcher=fetcher)
    progress = []
    with pytest.raises(FetchError) as excinfo:
        analyzer.compare_urls('https://new', 'https://old', 80, on_progress=progress.append)
    assert excinfo.value.status_code == 404
    assert progress == [10]
    assert analyzer.last_result is None


def test_compare_urls_rejects_bad_threshold():
    analyzer = PageAnalyzer(fetcher=StubFetcher())
    with pytest.raises(ValueError):
        analyzer.compare_urls('https://new', 'https://old', 150)


def test_generate_report():
    analyzer = PageAnalyzer()
    assert analyzer.generate_report() == "No comparison has been performed yet."
    analyzer.compare_html(GOLDEN_HTML, '', 'a', 'b')
    report = analyzer.generate_report(threshold=27)
    assert 'Overall Score: 27%' in report
    assert 'Result: PASS' in report
    assert 'Result: FAIL' in analyzer.generate_report(threshold=28)


def test_generate_report_writes_file(tmp_path):
    analyzer = PageAnalyzer()
    analyzer.compare_html(PAGE_HTML, PAGE_HTML, 'a', 'b')
    output = tmp_path / 'report.txt'
    text = analyzer.generate_report(threshold=80, output_path=output)
    assert output.read_text(encoding='utf-8') == text


def test_comparison_to_dict():
    data = PageAnalyzer().compare_html(GOLDEN_HTML, '', 'a', 'b').to_dict()
    assert data['overallScore'] == 27
    assert data['contentBreakdown']['metadata'] == 60
    assert data['preGoLiveData']['title'] == 'Hi'
    assert data['currentData']['url'] == 'b'
