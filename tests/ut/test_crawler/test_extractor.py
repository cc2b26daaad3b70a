"""
Unit tests for HTML extraction
"""
from datetime import datetime, timedelta, timezone

from src.crawler.extractor import ContentExtractor, utc_today

BASE_URL = "https://m.news.cn/"

LISTING_HTML = """
<html><body>
  <div class="headline"><a href="/politics/20240105/abc/c.html">第一条重要新闻标题内容</a></div>
  <ul class="list">
    <li><a href="https://www.news.cn/2024/0210/xyz.html">第二条新闻的标题文本</a></li>
    <li><a href="/politics/20240301/dup/c.html">第一条重要新闻标题内容</a></li>
  </ul>
</body></html>
"""


class TestExtractArticleList:
    """Test extract_article_list"""

    def setup_method(self):
        self.extractor = ContentExtractor()

    def test_dedup_first_occurrence_and_newest_first(self):
        """Three anchors, two sharing a title, give two articles newest first"""
        articles = self.extractor.extract_article_list(LISTING_HTML, BASE_URL, today="2024-06-01")

        assert len(articles) == 2
        assert articles[0].title == "第二条新闻的标题文本"
        assert articles[0].date == "2024-02-10"
        assert articles[1].title == "第一条重要新闻标题内容"
        assert articles[1].url == "https://m.news.cn/politics/20240105/abc/c.html"
        assert articles[1].date == "2024-01-05"

    def test_deterministic(self):
        first = self.extractor.extract_article_list(LISTING_HTML, BASE_URL, today="2024-06-01")
        second = self.extractor.extract_article_list(LISTING_HTML, BASE_URL, today="2024-06-01")

        assert first == second

    def test_short_titles_and_script_links_skipped(self):
        html = """
        <div class="list"><ul>
          <li><a href="/a.html">首页</a></li>
          <li><a href="/b.html">   六个字的标题   </a></li>
          <li><a href="javascript:void(0)">这是一个脚本链接标题</a></li>
          <li><a>没有链接地址的新闻标题</a></li>
          <li><a href="/c.html">七个字的新闻标题</a></li>
        </ul></div>
        """
        articles = self.extractor.extract_article_list(html, BASE_URL, today="2024-06-01")

        assert [a.title for a in articles] == ["七个字的新闻标题"]
        assert articles[0].url == "https://m.news.cn/c.html"

    def test_undated_url_uses_today(self):
        html = '<div id="recommend"><ul><li><a href="/detail/abc.html">没有日期的新闻标题</a></li></ul></div>'

        articles = self.extractor.extract_article_list(html, BASE_URL, today="2024-06-01")

        assert articles[0].date == "2024-06-01"

    def test_all_selectors_collected(self):
        html = """
        <div class="swiper-slide"><div class="tit"><a href="/20240101/a/c.html">轮播区域新闻标题一</a></div></div>
        <ul class="products"><li><a href="/20240102/b/c.html">产品区域新闻标题二</a></li></ul>
        <div id="recommend"><li><a href="/20240103/c/c.html">推荐区域新闻标题三</a></li></div>
        <div class="sidebar"><a href="/20240104/d/c.html">不在选择器中的标题</a></div>
        """
        articles = self.extractor.extract_article_list(html, BASE_URL, today="2024-06-01")

        assert [a.date for a in articles] == ["2024-01-03", "2024-01-02", "2024-01-01"]

    def test_malformed_html_does_not_raise(self):
        html = '<div class="headline"><a href="/20240101/x/c.html">未闭合标签的新闻标题<div><p>'

        articles = self.extractor.extract_article_list(html, BASE_URL, today="2024-06-01")

        assert isinstance(articles, list)

    def test_empty_html(self):
        assert self.extractor.extract_article_list("", BASE_URL) == []


class TestExtractDate:
    """Test URL date patterns"""

    def test_compact_date(self):
        assert ContentExtractor.extract_date("https://m.news.cn/20240105/x.html", "d") == "2024-01-05"

    def test_split_date(self):
        assert ContentExtractor.extract_date("https://m.news.cn/2024/0105/x.html", "d") == "2024-01-05"

    def test_no_date(self):
        assert ContentExtractor.extract_date("https://m.news.cn/x.html", "default") == "default"


class TestExtractArticleBody:
    """Test extract_article_body"""

    def setup_method(self):
        self.extractor = ContentExtractor()

    def test_prefers_detail_container(self):
        html = """
        <html><body>
          <div class="content">侧栏内容</div>
          <div id="p-detail"><script>var x = 1;</script><p>正文  第一段</p>
          <p>正文第二段</p><style>.a{}</style></div>
        </body></html>
        """
        assert self.extractor.extract_article_body(html) == "正文 第一段 正文第二段"

    def test_skips_empty_container(self):
        html = '<div class="main-content">   </div><article>文章正文</article>'

        assert self.extractor.extract_article_body(html) == "文章正文"

    def test_falls_back_to_body(self):
        html = "<html><body><script>track()</script><p>只有正文</p><p>没有容器</p></body></html>"

        assert self.extractor.extract_article_body(html) == "只有正文没有容器"

    def test_truncates(self):
        html = f"<div id='p-detail'>{'字' * 5000}</div>"

        body = self.extractor.extract_article_body(html)

        assert len(body) == 4000

    def test_custom_limit(self):
        extractor = ContentExtractor(max_body_chars=10)

        assert extractor.extract_article_body("<article>" + "a" * 50 + "</article>") == "a" * 10


class TestUtcToday:
    """Fallback dates follow the UTC calendar"""

    def test_after_local_midnight_still_previous_utc_day(self):
        beijing = timezone(timedelta(hours=8))

        assert utc_today(datetime(2024, 1, 2, 0, 30, tzinfo=beijing)) == "2024-01-01"

    def test_utc_input(self):
        assert utc_today(datetime(2024, 1, 2, 23, 59, tzinfo=timezone.utc)) == "2024-01-02"

    def test_default_is_current_utc_date(self):
        before = datetime.now(timezone.utc).date().isoformat()
        today = utc_today()
        after = datetime.now(timezone.utc).date().isoformat()

        assert today in (before, after)
